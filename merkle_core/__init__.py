"""
merkle-allowlist core library.

Standardized Merkle trees over typed records: build once, prove membership
of one or many records, verify proofs without the tree, and persist trees
with full integrity checks on reload.
"""

from merkle_core.encoding import encode_leaf, hash_leaf, leaf_hash
from merkle_core.merkle import (
    HashMultiproof,
    MerkleTree,
    Multiproof,
    StandardMerkleTree,
    dump_tree,
    load_tree,
    verify_multiproof,
    verify_proof,
)
from merkle_core.schemas.errors import (
    CorruptedTreeError,
    EmptyTreeError,
    EncodingError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    MalformedProofError,
    MerkleException,
)

__all__ = [
    "encode_leaf",
    "hash_leaf",
    "leaf_hash",
    "MerkleTree",
    "HashMultiproof",
    "StandardMerkleTree",
    "Multiproof",
    "dump_tree",
    "load_tree",
    "verify_proof",
    "verify_multiproof",
    "MerkleException",
    "EncodingError",
    "EmptyTreeError",
    "IndexOutOfRangeError",
    "InvalidArgumentError",
    "CorruptedTreeError",
    "MalformedProofError",
]

__version__ = "0.1.0"
