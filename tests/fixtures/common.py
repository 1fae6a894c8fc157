"""
Common test fixtures shared by all modules.

Provides:
- The five-address allowlist scenario and its known hashes
- Small factory helpers for records, leaf hashes and trees
"""

from typing import Any, Optional

from merkle_core.crypto.hashing import from_hex, keccak256
from merkle_core.merkle import MerkleTree, StandardMerkleTree


# =============================================================================
# Five-address allowlist (keccak256)
# =============================================================================

ALLOWLIST_ENCODING = ["address", "uint256", "uint256"]

GOLDEN_ROOT = "0xa7d92d9d6d2393ac226f1cca8435f58a7e9a84dceb5ef0dc4e38fcd627461918"

GOLDEN_LEAVES = [
    "0x40ad6fd6216ca69ae8d9e6247e4e64d9956d7eb08b1a42e0c0a6c81cfbe0840f",
    "0x68e70e602c1e40c237fd5767c6c84d5e4823c508813c69ddae4e2fbe28669d0b",
    "0x429aae623f982e59466bf162cd1462c1ac267441fb27d842851ae872e49e1b6b",
    "0x48ae066415e38fd7ad3629268b112add4d411a10985c24afc4ccfcf78b4ecb45",
    "0x33315c1f1a6d5b277b76b7fd6d2e3fe0edab24f1a5660e6f947129816fcdb250",
]

# Internal nodes: level 1 = [H(L0,L1), H(L2,L3), H(L4,L4)], level 2 = [H(A,B), H(C,C)]
GOLDEN_LEVEL_1 = [
    "0xdadee3aa7fa9737be3d5e4e536d64d1a7e734cdaac88e5f74eb70599be507eed",
    "0x01f81368740181c69073fe2541cba98f5c2d1132b0f9cf3efd26d384b5a4e3ff",
    "0x3733690fd1187a96602d397e407cc8a8401aadda415388e0f99f7c59fa387b09",
]
GOLDEN_LEVEL_2 = [
    "0x87467c63e2b09f5a95ebee1bea7b0f76a8487808d9e8687394a677fe2690179b",
    "0x13674d06f292726fd9f34be106ae326dc98dc916da921020854103f5822dbf9a",
]

KECCAK_EMPTY = "0xc5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"


def make_address(n: int) -> str:
    """Lowercase 0x address whose numeric value is n."""
    return "0x" + format(n, "040x")


def make_allowlist_records(count: int = 5) -> list[list[Any]]:
    """Records (address = i + 1, amount = i, tier = 2) for i in range(count)."""
    return [[make_address(i + 1), i, 2] for i in range(count)]


# =============================================================================
# Hash-level helpers
# =============================================================================

def make_leaf_hashes(count: int, prefix: str = "leaf") -> list[bytes]:
    """Distinct 32-byte leaf hashes."""
    return [keccak256(f"{prefix}-{i}".encode()) for i in range(count)]


def make_hash_tree(count: int, hash_name: str = "keccak256") -> MerkleTree:
    return MerkleTree.build(make_leaf_hashes(count), hash_name)


def make_standard_tree(
    count: int = 5,
    sort_leaves: bool = False,
    hash_name: str = "keccak256",
    records: Optional[list[list[Any]]] = None,
) -> StandardMerkleTree:
    return StandardMerkleTree.of(
        records if records is not None else make_allowlist_records(count),
        ALLOWLIST_ENCODING,
        sort_leaves=sort_leaves,
        hash_name=hash_name,
    )


def golden_bytes(hex_values: list[str]) -> list[bytes]:
    return [from_hex(h) for h in hex_values]
