"""
Schemas & Canonicalization
File: dump.py

Purpose: Persisted layout of a StandardMerkleTree and the JSON shape of
proof output. JSON field names are camelCase so dumps can be consumed by
non-Python tooling; Python attribute names stay snake_case.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from .versioning import FORMAT_VERSION


class ValueEntry(BaseModel):
    """One leaf record and the flat-array slot holding its leaf hash."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    value: list[Any] = Field(..., description="Record fields in JSON-safe form")
    tree_index: StrictInt = Field(..., alias="treeIndex", ge=0)


class TreeDump(BaseModel):
    """
    Serialized tree.

    ``tree`` is the flat node-hash array, level by level, leaves first and
    root last. ``values`` is in original record order.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    format_version: str = Field(default=FORMAT_VERSION, alias="format")
    hash_name: str = Field(default="keccak256", alias="hash")
    leaf_encoding: list[str] = Field(..., alias="leafEncoding", min_length=1)
    root: str = Field(..., description="0x-prefixed root hash")
    tree: list[str] = Field(..., min_length=1)
    values: list[ValueEntry] = Field(..., min_length=1)


class ProofOutput(BaseModel):
    """Single-leaf proof as printed by the CLI."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    index: int = Field(..., ge=0)
    value: list[Any]
    tree_index: StrictInt = Field(..., alias="treeIndex", ge=0)
    proof: list[str]


class MultiproofOutput(BaseModel):
    """Multiproof as printed by the CLI; ``leaves`` are record values."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    leaves: list[list[Any]]
    proof: list[str]
    proof_flags: list[bool] = Field(..., alias="proofFlags")
