"""
Hashing Utilities
Hash primitives and hex helpers for Merkle commitments.

This module provides:
- keccak256 (Ethereum, default) and SHA-256 for raw bytes
- A name -> hash function registry so the algorithm can be configured
- Sorted-pair parent hashing
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Always hash raw bytes exactly as given
- Parent hashing sorts the two children, so a parent never depends on
  which child was "left" during traversal
- All operations are deterministic
"""
from __future__ import annotations

import hashlib
import re
from typing import Callable

from eth_utils import keccak

from merkle_core.schemas.errors import InvalidArgumentError


HashFunction = Callable[[bytes], bytes]

# Digest size of every supported hash function
HASH_SIZE: int = 32

DEFAULT_HASH: str = "keccak256"

_HEX_PATTERN = re.compile(r"0[xX][0-9a-fA-F]*")


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 hash used by the EVM.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=data)


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


HASH_FUNCTIONS: dict[str, HashFunction] = {
    "keccak256": keccak256,
    "sha256": sha256,
}


def get_hash_function(name: str) -> HashFunction:
    """
    Look up a hash function by name.

    Raises:
        InvalidArgumentError: If the name is not a supported algorithm
    """
    try:
        return HASH_FUNCTIONS[name]
    except KeyError:
        raise InvalidArgumentError(
            f"Unknown hash algorithm: {name!r}. "
            f"Supported: {sorted(HASH_FUNCTIONS)}",
            details={"hash": name, "supported": sorted(HASH_FUNCTIONS)},
        ) from None


def hash_pair(a: bytes, b: bytes, hash_fn: HashFunction = keccak256) -> bytes:
    """
    Compute the parent hash of two child nodes.

    parent = H(min(a, b) || max(a, b)), ordering lexicographically on the
    raw bytes. Swapping the arguments never changes the result.

    Args:
        a: One child hash
        b: The other child hash
        hash_fn: Hash function to apply

    Returns:
        Parent hash (32 bytes)
    """
    if a <= b:
        return hash_fn(a + b)
    return hash_fn(b + a)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    if not isinstance(hex_string, str):
        raise ValueError(f"Hex value must be a string, got {type(hex_string).__name__}")

    if not hex_string.startswith(("0x", "0X")):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    # bytes.fromhex would skip whitespace
    if not _HEX_PATTERN.fullmatch(hex_string):
        raise ValueError(f"Invalid hex characters in string: {hex_string!r}")

    return bytes.fromhex(hex_content)


def hash_from_hex(hex_string: str) -> bytes:
    """Decode a 0x-prefixed hex string that must hold exactly one hash."""
    data = from_hex(hex_string)
    if len(data) != HASH_SIZE:
        raise ValueError(
            f"Expected a {HASH_SIZE}-byte hash, got {len(data)} bytes"
        )
    return data


__all__ = [
    "HashFunction",
    "HASH_SIZE",
    "DEFAULT_HASH",
    "HASH_FUNCTIONS",
    "keccak256",
    "sha256",
    "get_hash_function",
    "hash_pair",
    "to_hex",
    "from_hex",
    "hash_from_hex",
]
