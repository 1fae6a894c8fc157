"""
Leaf encoding: typed records -> canonical bytes -> leaf hashes.
"""
from .leaf import (
    canonical_type,
    encode_leaf,
    hash_leaf,
    leaf_hash,
    normalize_record,
    normalize_value,
    parse_leaf_encoding,
    to_json_value,
)

__all__ = [
    "canonical_type",
    "encode_leaf",
    "hash_leaf",
    "leaf_hash",
    "normalize_record",
    "normalize_value",
    "parse_leaf_encoding",
    "to_json_value",
]
