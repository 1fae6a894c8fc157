"""
Runtime Configuration Module

Provides configuration loading and management for tree construction,
logging and CLI output.
"""

from .runtime import LoggingConfig, OutputConfig, RuntimeConfig, TreeConfig

__all__ = [
    "RuntimeConfig",
    "TreeConfig",
    "LoggingConfig",
    "OutputConfig",
]
