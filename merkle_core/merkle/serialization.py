"""
Tree Serialization
Persist a StandardMerkleTree and reload it without trusting the dump.

Dump layout (JSON, see merkle_core.schemas.dump.TreeDump):
    {
      "format": "standard-dup-v1",
      "hash": "keccak256",
      "leafEncoding": ["address", "uint256", "uint256"],
      "root": "0x...",
      "tree": ["0x...", ...],          # flat node array, leaves first
      "values": [{"value": [...], "treeIndex": 0}, ...]
    }

Load Checks (any failure raises CorruptedTreeError):
1. Schema, format marker, hash algorithm and leaf encoding are known
2. len(tree) is exactly the node count for len(values) leaves
3. Every hash is 32 bytes; every treeIndex is a distinct leaf slot
4. Every internal node equals the sorted-pair hash of its children
5. The declared root equals the recomputed root
6. Every record hashes to the leaf at its treeIndex
"""
from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from pydantic import ValidationError

from merkle_core.crypto.hashing import HASH_FUNCTIONS, hash_from_hex, to_hex
from merkle_core.encoding.leaf import leaf_hash, parse_leaf_encoding, to_json_value
from merkle_core.merkle.standard import StandardMerkleTree
from merkle_core.merkle.tree import MerkleTree, tree_size
from merkle_core.schemas.dump import TreeDump, ValueEntry
from merkle_core.schemas.errors import CorruptedTreeError, EncodingError
from merkle_core.schemas.versioning import FORMAT_VERSION, is_supported_format


logger = logging.getLogger(__name__)


def dump_tree(tree: StandardMerkleTree) -> dict[str, Any]:
    """
    Serialize a tree to a JSON-ready dict.

    Records are stored in their JSON-safe form (see to_json_value), in
    original record order.
    """
    model = TreeDump(
        format_version=FORMAT_VERSION,
        hash_name=tree.hash_name,
        leaf_encoding=list(tree.leaf_encoding),
        root=tree.root,
        tree=[to_hex(h) for h in tree.tree.hashes()],
        values=[
            ValueEntry(
                value=to_json_value(value, tree.leaf_encoding),
                tree_index=tree.tree_index(index),
            )
            for index, value in tree.entries()
        ],
    )
    return model.model_dump(mode="json", by_alias=True)


def _parse(data: Any) -> TreeDump:
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except ValueError as e:
            raise CorruptedTreeError(f"Dump is not valid JSON: {e}") from e
    if not isinstance(data, Mapping):
        raise CorruptedTreeError(
            f"Dump must be a JSON object, got {type(data).__name__}"
        )
    try:
        return TreeDump.model_validate(data)
    except ValidationError as e:
        raise CorruptedTreeError(
            f"Dump does not match the tree schema: {e.error_count()} error(s)",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e


def load_tree(data: Any) -> StandardMerkleTree:
    """
    Reload a tree from dump_tree() output (dict or JSON text).

    Internal nodes are recomputed from the stored leaf hashes and compared
    with the stored array and root; records are re-hashed and compared with
    their leaves. Nothing from the dump is accepted unchecked.

    Raises:
        CorruptedTreeError: If any load check fails
    """
    try:
        return _load_checked(data)
    except CorruptedTreeError as e:
        logger.warning("Rejected tree dump: %s", e.message)
        raise


def _load_checked(data: Any) -> StandardMerkleTree:
    dump = _parse(data)

    if not is_supported_format(dump.format_version):
        raise CorruptedTreeError(
            f"Unsupported dump format: {dump.format_version!r}",
            details={"format": dump.format_version},
        )
    if dump.hash_name not in HASH_FUNCTIONS:
        raise CorruptedTreeError(
            f"Unsupported hash algorithm: {dump.hash_name!r}",
            details={"hash": dump.hash_name},
        )
    try:
        encoding = parse_leaf_encoding(dump.leaf_encoding)
    except EncodingError as e:
        raise CorruptedTreeError(f"Invalid leaf encoding: {e.message}") from e

    leaf_count = len(dump.values)
    expected_size = tree_size(leaf_count)
    if len(dump.tree) != expected_size:
        raise CorruptedTreeError(
            f"Tree array has {len(dump.tree)} nodes, expected {expected_size} "
            f"for {leaf_count} leaves",
            details={"expected": expected_size, "actual": len(dump.tree)},
        )

    try:
        stored = [hash_from_hex(h) for h in dump.tree]
        declared_root = hash_from_hex(dump.root)
    except ValueError as e:
        raise CorruptedTreeError(f"Invalid hash in dump: {e}") from e

    tree_indices = [entry.tree_index for entry in dump.values]
    for index, slot in enumerate(tree_indices):
        if slot >= leaf_count:
            raise CorruptedTreeError(
                f"Record {index} treeIndex {slot} is not a leaf slot",
                details={"record_index": index, "tree_index": slot},
            )
    if len(set(tree_indices)) != leaf_count:
        raise CorruptedTreeError("Two records share the same treeIndex")

    rebuilt = MerkleTree.build(stored[:leaf_count], dump.hash_name)
    for slot, (expected, actual) in enumerate(zip(rebuilt.hashes(), stored)):
        if expected != actual:
            raise CorruptedTreeError(
                f"Stored node {slot} does not match its recomputed hash",
                details={"slot": slot},
            )
    if rebuilt.root != declared_root:
        raise CorruptedTreeError(
            "Declared root does not match the recomputed root",
            details={"declared": dump.root, "computed": to_hex(rebuilt.root)},
        )

    for index, entry in enumerate(dump.values):
        try:
            digest = leaf_hash(entry.value, encoding, dump.hash_name)
        except EncodingError as e:
            raise CorruptedTreeError(
                f"Record {index} does not match the leaf encoding: {e.message}",
                details={"record_index": index},
            ) from e
        if digest != stored[entry.tree_index]:
            raise CorruptedTreeError(
                f"Record {index} does not hash to the leaf at slot {entry.tree_index}",
                details={"record_index": index, "tree_index": entry.tree_index},
            )

    logger.debug("Loaded tree: %d records, root=%s", leaf_count, dump.root)
    return StandardMerkleTree(
        rebuilt,
        [entry.value for entry in dump.values],
        encoding,
        tree_indices,
    )


__all__ = ["dump_tree", "load_tree"]
