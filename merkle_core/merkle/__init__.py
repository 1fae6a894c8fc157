"""
Merkle Tree and Commitments
Deterministic Merkle tree construction + proof generation/verification.

This package provides:
- MerkleTree: tree over 32-byte leaf hashes (build, proofs, multiproofs)
- HashMultiproof / process_* / verify_*: tree-independent verification
- StandardMerkleTree: typed records in, hex roots and proofs out
- dump_tree / load_tree: validated persistence

Canonical Commitment Rules:
1. Leaf hashing: H(H(abi.encode(record)))
2. Parent hashing: H(min(left, right) || max(left, right))
3. Padding: pair the last node with itself if a level is odd
4. Empty tree: rejected (EmptyTreeError)
5. Single leaf: root = leaf

Usage:
    from merkle_core.merkle import StandardMerkleTree

    tree = StandardMerkleTree.of(records, ["address", "uint256"])
    proof = tree.get_proof(2)
    assert StandardMerkleTree.verify(tree.root, ["address", "uint256"],
                                     records[2], proof)
"""
from .nodes import InternalNode, LeafNode, Node
from .proofs import (
    HashMultiproof,
    process_multiproof,
    process_proof,
    verify_multiproof,
    verify_proof,
)
from .tree import MerkleTree, compute_tree_depth, level_sizes, tree_size
from .standard import Multiproof, StandardMerkleTree
from .serialization import dump_tree, load_tree


__all__ = [
    # Nodes
    "LeafNode",
    "InternalNode",
    "Node",
    # Hash-level tree
    "MerkleTree",
    "level_sizes",
    "tree_size",
    "compute_tree_depth",
    # Verification
    "HashMultiproof",
    "process_proof",
    "process_multiproof",
    "verify_proof",
    "verify_multiproof",
    # Record-level tree
    "StandardMerkleTree",
    "Multiproof",
    # Persistence
    "dump_tree",
    "load_tree",
]
