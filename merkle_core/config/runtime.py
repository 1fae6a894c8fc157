"""
Runtime Configuration

Central configuration for tree construction, logging and output.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from merkle_core.crypto.hashing import DEFAULT_HASH, HASH_FUNCTIONS

load_dotenv()


def _env_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass
class TreeConfig:
    """How trees are built."""
    hash_name: str = DEFAULT_HASH
    sort_leaves: bool = False

    def __post_init__(self):
        if self.hash_name not in HASH_FUNCTIONS:
            raise ValueError(
                f"Unknown hash algorithm: {self.hash_name!r}. "
                f"Supported: {sorted(HASH_FUNCTIONS)}"
            )


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class OutputConfig:
    """Formatting of files written by the CLI."""
    indent: Optional[int] = 2


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - MERKLE_HASH: hash algorithm (keccak256, sha256)
        - MERKLE_SORT_LEAVES: order leaves by hash (true/false)
        - MERKLE_LOG_LEVEL: log level name
        - MERKLE_LOG_FILE: also log to this file
        - MERKLE_OUTPUT_INDENT: JSON indent for written files (0 = compact)
        """
        overrides: dict[str, Any] = {}

        if os.getenv("MERKLE_HASH"):
            overrides.setdefault("tree", {})["hash_name"] = os.getenv("MERKLE_HASH")
        if os.getenv("MERKLE_SORT_LEAVES"):
            overrides.setdefault("tree", {})["sort_leaves"] = _env_bool(
                os.getenv("MERKLE_SORT_LEAVES", "false")
            )

        if os.getenv("MERKLE_LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv("MERKLE_LOG_LEVEL")
        if os.getenv("MERKLE_LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv("MERKLE_LOG_FILE")

        if os.getenv("MERKLE_OUTPUT_INDENT"):
            indent = int(os.getenv("MERKLE_OUTPUT_INDENT", "2"))
            overrides.setdefault("output", {})["indent"] = indent or None

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML (or JSON) file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        tree_data = data.get("tree", {})
        logging_data = data.get("logging", {})
        output_data = data.get("output", {})

        return cls(
            tree=TreeConfig(**tree_data) if tree_data else TreeConfig(),
            logging=LoggingConfig(**logging_data) if logging_data else LoggingConfig(),
            output=OutputConfig(**output_data) if output_data else OutputConfig(),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section in ("tree", "logging", "output"):
            for key, value in overrides.get(section, {}).items():
                setattr(getattr(new_config, section), key, value)

        # Re-run validation on the merged tree section
        new_config.tree = TreeConfig(**vars(new_config.tree))
        return new_config

    def to_dict(self) -> dict[str, Any]:
        return {
            "tree": vars(self.tree).copy(),
            "logging": vars(self.logging).copy(),
            "output": vars(self.output).copy(),
            "extra": dict(self.extra),
        }
