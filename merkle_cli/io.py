"""
CLI file helpers.

All file access happens here; the library only ever sees in-memory data.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from merkle_core.schemas.canonical import dumps_canonical


class CLIInputError(Exception):
    """Input file or argument could not be read."""
    pass


def read_json(path: str | Path) -> Any:
    """Read and parse a JSON file."""
    path = Path(path)
    if not path.exists():
        raise CLIInputError(f"File not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except ValueError as e:
        raise CLIInputError(f"Invalid JSON in {path}: {e}") from e


def parse_json_arg(text: str, name: str) -> Any:
    """Parse a JSON command-line argument."""
    try:
        return json.loads(text)
    except ValueError as e:
        raise CLIInputError(f"--{name} is not valid JSON: {e}") from e


def write_json(path: str | Path, obj: Any, indent: int | None = 2) -> Path:
    """Write an object as canonical JSON (sorted keys)."""
    path = Path(path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    content = dumps_canonical(obj, indent=indent)
    path.write_text(content + "\n", encoding="utf-8")
    return path


def parse_types(text: str) -> list[str]:
    """Split a comma-separated --types argument."""
    types = [t.strip() for t in text.split(",") if t.strip()]
    if not types:
        raise CLIInputError("--types must name at least one type")
    return types
