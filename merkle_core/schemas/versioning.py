"""
Schemas & Canonicalization
File: versioning.py

Purpose: Centralize dump format markers.
This file must stay tiny and import nothing from other schema files
to avoid circular dependencies.
"""

# Format marker written into every tree dump
FORMAT_VERSION: str = "standard-dup-v1"

SUPPORTED_FORMAT_VERSIONS: frozenset[str] = frozenset({FORMAT_VERSION})


def is_supported_format(version: str) -> bool:
    """Check whether a dump format marker is readable."""
    return version in SUPPORTED_FORMAT_VERSIONS
