"""
Core cryptographic utilities.

Hash primitives and hex helpers shared by the leaf encoder, tree builder
and verifier.
"""
from .hashing import (
    DEFAULT_HASH,
    HASH_FUNCTIONS,
    HASH_SIZE,
    HashFunction,
    from_hex,
    get_hash_function,
    hash_from_hex,
    hash_pair,
    keccak256,
    sha256,
    to_hex,
)

__all__ = [
    "DEFAULT_HASH",
    "HASH_FUNCTIONS",
    "HASH_SIZE",
    "HashFunction",
    "from_hex",
    "get_hash_function",
    "hash_from_hex",
    "hash_pair",
    "keccak256",
    "sha256",
    "to_hex",
]
