"""
Test fixtures package for merkle-allowlist tests.

Usage:
    from fixtures import make_standard_tree, GOLDEN_ROOT

    def test_something():
        tree = make_standard_tree()
        assert tree.root == GOLDEN_ROOT
"""

from .common import (
    ALLOWLIST_ENCODING,
    GOLDEN_LEAVES,
    GOLDEN_LEVEL_1,
    GOLDEN_LEVEL_2,
    GOLDEN_ROOT,
    KECCAK_EMPTY,
    golden_bytes,
    make_address,
    make_allowlist_records,
    make_hash_tree,
    make_leaf_hashes,
    make_standard_tree,
)

__all__ = [
    "ALLOWLIST_ENCODING",
    "GOLDEN_LEAVES",
    "GOLDEN_LEVEL_1",
    "GOLDEN_LEVEL_2",
    "GOLDEN_ROOT",
    "KECCAK_EMPTY",
    "golden_bytes",
    "make_address",
    "make_allowlist_records",
    "make_hash_tree",
    "make_leaf_hashes",
    "make_standard_tree",
]
