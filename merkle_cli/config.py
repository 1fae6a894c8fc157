"""
CLI Configuration

Locates and loads the runtime configuration for the CLI.
Supports a YAML configuration file and MERKLE_* environment variables.
"""

from __future__ import annotations

from pathlib import Path

from merkle_core.config import RuntimeConfig


CONFIG_FILE_NAME = "merkle.yaml"


def default_config_paths() -> list[Path]:
    """Config files checked, in order, when --config is not given."""
    return [
        Path.cwd() / CONFIG_FILE_NAME,
        Path.cwd() / f".{CONFIG_FILE_NAME}",
        Path.home() / ".config" / "merkle-allowlist" / "config.yaml",
    ]


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration

    Raises:
        FileNotFoundError: If config_path is given but does not exist
    """
    config = RuntimeConfig()

    if config_path is not None:
        config = RuntimeConfig.from_yaml(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                config = RuntimeConfig.from_yaml(default_path)
                break

    return config.with_env_overrides()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """# merkle-allowlist configuration
tree:
  # keccak256 matches on-chain verifiers; sha256 is also supported
  hash_name: keccak256
  # false keeps leaves in record order
  sort_leaves: false

logging:
  level: INFO
  file: null

output:
  # JSON indent for written files; null for compact output
  indent: 2
"""
