"""
Standard Merkle Tree
Record-level facade: typed records in, hex roots and proofs out.

A StandardMerkleTree owns:
- the original records, in the order they were supplied
- the leaf encoding (one type tag per field)
- the underlying MerkleTree over the records' leaf hashes
- the record index -> tree slot mapping

Record index is the position in the caller's list. Tree slot is where the
leaf hash sits in the flat node array. They are equal unless the tree was
built with sort_leaves=True, which orders leaves by hash.

Usage:
    tree = StandardMerkleTree.of(
        [["0x1111111111111111111111111111111111111111", "5000000000000000000"]],
        ["address", "uint256"],
    )
    proof = tree.get_proof(0)
    assert StandardMerkleTree.verify(tree.root, ["address", "uint256"],
                                     tree.at(0), proof)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Sequence

from merkle_core.crypto.hashing import DEFAULT_HASH, get_hash_function, hash_from_hex, to_hex
from merkle_core.encoding.leaf import leaf_hash as compute_leaf_hash
from merkle_core.encoding.leaf import parse_leaf_encoding, to_json_value
from merkle_core.merkle.proofs import process_multiproof, process_proof
from merkle_core.merkle.tree import MerkleTree
from merkle_core.schemas.dump import MultiproofOutput
from merkle_core.schemas.errors import (
    CorruptedTreeError,
    EmptyTreeError,
    EncodingError,
    IndexOutOfRangeError,
    MalformedProofError,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Multiproof:
    """
    Record-level multiproof.

    ``leaves`` holds the proved records in the order the verifier must
    consume them (ascending tree slot), ``proof`` the 0x-hex sibling hashes.
    """
    leaves: list[list[Any]]
    proof: list[str]
    proof_flags: list[bool]

    def to_output(self, leaf_encoding: Sequence[str]) -> MultiproofOutput:
        """JSON-safe output model (records converted with to_json_value)."""
        return MultiproofOutput(
            leaves=[to_json_value(leaf, leaf_encoding) for leaf in self.leaves],
            proof=list(self.proof),
            proof_flags=list(self.proof_flags),
        )


def _decode_hash(value: bytes | str, what: str) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    try:
        return hash_from_hex(value)
    except ValueError as e:
        raise MalformedProofError(f"Invalid {what}: {e}") from e


def _decode_hashes(values: Sequence[bytes | str], what: str) -> list[bytes]:
    if isinstance(values, (str, bytes)):
        raise MalformedProofError(f"{what} must be a list of hashes")
    return [_decode_hash(v, f"{what}[{i}]") for i, v in enumerate(values)]


class StandardMerkleTree:
    """
    Immutable Merkle tree over typed records.

    Build with StandardMerkleTree.of() or reload with StandardMerkleTree.load().
    """

    def __init__(
        self,
        tree: MerkleTree,
        values: Sequence[Sequence[Any]],
        leaf_encoding: Sequence[str],
        tree_indices: Sequence[int],
    ) -> None:
        if len(values) != tree.leaf_count or len(tree_indices) != tree.leaf_count:
            raise CorruptedTreeError(
                "Record count does not match the tree's leaf count",
                details={"values": len(values), "leaves": tree.leaf_count},
            )
        self._tree = tree
        self._values: tuple[list[Any], ...] = tuple(list(v) for v in values)
        self._leaf_encoding: tuple[str, ...] = parse_leaf_encoding(leaf_encoding)
        self._tree_indices: tuple[int, ...] = tuple(tree_indices)
        self._slot_to_index: dict[int, int] = {
            slot: index for index, slot in enumerate(self._tree_indices)
        }
        self._hash_lookup: dict[bytes, int] = {}
        for index, slot in enumerate(self._tree_indices):
            self._hash_lookup.setdefault(tree.leaf_hash(slot), index)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def of(
        cls,
        values: Sequence[Sequence[Any]],
        leaf_encoding: Sequence[str],
        *,
        sort_leaves: bool = False,
        hash_name: str = DEFAULT_HASH,
    ) -> "StandardMerkleTree":
        """
        Build a tree from records.

        Args:
            values: Records; each must match leaf_encoding
            leaf_encoding: One type tag per record field
            sort_leaves: Place leaves in ascending hash order instead of
                record order
            hash_name: "keccak256" (default) or "sha256"

        Raises:
            EmptyTreeError: If values is empty
            EncodingError: If any record does not match leaf_encoding
        """
        encoding = parse_leaf_encoding(leaf_encoding)
        if len(values) == 0:
            raise EmptyTreeError()

        hashed: list[tuple[int, bytes]] = []
        for index, value in enumerate(values):
            try:
                hashed.append((index, compute_leaf_hash(value, encoding, hash_name)))
            except EncodingError as e:
                e.details.setdefault("record_index", index)
                raise

        if sort_leaves:
            hashed.sort(key=lambda item: item[1])

        tree = MerkleTree.build([h for _, h in hashed], hash_name)

        tree_indices = [0] * len(hashed)
        for position, (index, _) in enumerate(hashed):
            tree_indices[index] = tree.leaf_slot(position)

        logger.info(
            "Built standard Merkle tree: %d records, encoding=%s, root=%s",
            len(values), ",".join(encoding), to_hex(tree.root),
        )
        return cls(tree, values, encoding, tree_indices)

    @classmethod
    def load(cls, data: Any) -> "StandardMerkleTree":
        """Reload a tree from dump() output. See serialization.load_tree."""
        from merkle_core.merkle.serialization import load_tree

        return load_tree(data)

    def dump(self) -> dict[str, Any]:
        """Serialize to a JSON-ready dict. See serialization.dump_tree."""
        from merkle_core.merkle.serialization import dump_tree

        return dump_tree(self)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def root(self) -> str:
        return to_hex(self._tree.root)

    @property
    def root_bytes(self) -> bytes:
        return self._tree.root

    @property
    def leaf_encoding(self) -> tuple[str, ...]:
        return self._leaf_encoding

    @property
    def hash_name(self) -> str:
        return self._tree.hash_name

    @property
    def tree(self) -> MerkleTree:
        return self._tree

    def __len__(self) -> int:
        return len(self._values)

    def at(self, index: int) -> list[Any]:
        """Record at ``index`` (a copy)."""
        self._check_index(index)
        return list(self._values[index])

    def tree_index(self, index: int) -> int:
        """Tree slot holding the leaf of record ``index``."""
        self._check_index(index)
        return self._tree_indices[index]

    def entries(self) -> Iterator[tuple[int, list[Any]]]:
        """Yield (record index, record) in original record order."""
        for index, value in enumerate(self._values):
            yield index, list(value)

    def leaf_hash(self, value: Sequence[Any]) -> str:
        return to_hex(compute_leaf_hash(value, self._leaf_encoding, self.hash_name))

    def leaf_lookup(self, value: Sequence[Any]) -> int:
        """
        Record index of ``value``.

        Lookup goes through the leaf hash, so equivalent spellings of a
        record (e.g. 2 and "2" for a uint) find the same entry.

        Raises:
            IndexOutOfRangeError: If the record is not in the tree
            EncodingError: If the record does not match the leaf encoding
        """
        digest = compute_leaf_hash(value, self._leaf_encoding, self.hash_name)
        index = self._hash_lookup.get(digest)
        if index is None:
            raise IndexOutOfRangeError("Leaf is not in tree")
        return index

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise IndexOutOfRangeError(
                f"Record index must be an integer, got {type(index).__name__}"
            )
        if not 0 <= index < len(self._values):
            raise IndexOutOfRangeError(
                f"Record index {index} out of range for {len(self._values)} records",
                index=index,
                leaf_count=len(self._values),
            )

    def _resolve(self, index_or_value: int | Sequence[Any]) -> int:
        if isinstance(index_or_value, int) and not isinstance(index_or_value, bool):
            self._check_index(index_or_value)
            return index_or_value
        return self.leaf_lookup(index_or_value)

    # ------------------------------------------------------------------
    # Proofs
    # ------------------------------------------------------------------

    def get_proof(self, index_or_value: int | Sequence[Any]) -> list[str]:
        """
        Proof for one record, given by record index or by value.

        Raises:
            IndexOutOfRangeError: Unknown index or record
        """
        index = self._resolve(index_or_value)
        proof = self._tree.get_proof(self._tree_indices[index])
        return [to_hex(h) for h in proof]

    def get_multiproof(self, items: Iterable[int | Sequence[Any]]) -> Multiproof:
        """
        Multiproof for several records, each given by index or by value.

        Raises:
            InvalidArgumentError: If items is empty
            IndexOutOfRangeError: Unknown index or record
        """
        slots = [self._tree_indices[self._resolve(item)] for item in items]
        hashed = self._tree.get_multiproof(slots)
        return Multiproof(
            leaves=[list(self._values[self._slot_to_index[slot]]) for slot in hashed.positions],
            proof=[to_hex(h) for h in hashed.proof],
            proof_flags=list(hashed.proof_flags),
        )

    def verify_leaf(self, index_or_value: int | Sequence[Any], proof: Sequence[bytes | str]) -> bool:
        """Check a proof for one of this tree's records against this tree's root."""
        index = self._resolve(index_or_value)
        return StandardMerkleTree.verify(
            self._tree.root,
            self._leaf_encoding,
            self._values[index],
            proof,
            hash_name=self.hash_name,
        )

    def verify_leaves(self, multiproof: Multiproof) -> bool:
        """Check a multiproof against this tree's root."""
        return StandardMerkleTree.verify_multiproof(
            self._tree.root,
            self._leaf_encoding,
            multiproof,
            hash_name=self.hash_name,
        )

    @staticmethod
    def verify(
        root: bytes | str,
        leaf_encoding: Sequence[str],
        leaf: Sequence[Any],
        proof: Sequence[bytes | str],
        hash_name: str = DEFAULT_HASH,
    ) -> bool:
        """
        Tree-independent verification of one record.

        Re-encodes ``leaf``, folds ``proof`` and compares with ``root``.
        Returns False for a mismatch, a malformed proof or a record that
        cannot be encoded.

        Raises:
            InvalidArgumentError: If hash_name is not a supported algorithm
        """
        get_hash_function(hash_name)
        try:
            expected = _decode_hash(root, "root")
            digest = compute_leaf_hash(leaf, leaf_encoding, hash_name)
            return process_proof(digest, _decode_hashes(proof, "proof"), hash_name) == expected
        except (MalformedProofError, EncodingError) as e:
            logger.debug("Proof rejected: %s", e.message)
            return False

    @staticmethod
    def verify_multiproof(
        root: bytes | str,
        leaf_encoding: Sequence[str],
        multiproof: Multiproof,
        hash_name: str = DEFAULT_HASH,
    ) -> bool:
        """
        Tree-independent verification of a record-level multiproof.

        Raises:
            InvalidArgumentError: If hash_name is not a supported algorithm
        """
        get_hash_function(hash_name)
        try:
            expected = _decode_hash(root, "root")
            leaves = [
                compute_leaf_hash(leaf, leaf_encoding, hash_name)
                for leaf in multiproof.leaves
            ]
            computed = process_multiproof(
                leaves,
                _decode_hashes(multiproof.proof, "proof"),
                list(multiproof.proof_flags),
                hash_name,
            )
            return computed == expected
        except (MalformedProofError, EncodingError) as e:
            logger.debug("Multiproof rejected: %s", e.message)
            return False

    # ------------------------------------------------------------------
    # Integrity
    # ------------------------------------------------------------------

    def validate(self) -> None:
        """
        Check that every record hashes to its leaf and every internal node
        matches its children.

        Raises:
            CorruptedTreeError: On the first inconsistency
        """
        for index, value in enumerate(self._values):
            slot = self._tree_indices[index]
            if not self._tree.is_leaf_slot(slot):
                raise CorruptedTreeError(
                    f"Record {index} points at non-leaf slot {slot}",
                    details={"record_index": index, "tree_index": slot},
                )
            try:
                digest = compute_leaf_hash(value, self._leaf_encoding, self.hash_name)
            except EncodingError as e:
                raise CorruptedTreeError(
                    f"Record {index} does not match the leaf encoding: {e.message}",
                    details={"record_index": index},
                ) from e
            if digest != self._tree.leaf_hash(slot):
                raise CorruptedTreeError(
                    f"Record {index} does not hash to the leaf at slot {slot}",
                    details={"record_index": index, "tree_index": slot},
                )
        self._tree.validate()

    def render(self) -> str:
        return self._tree.render()


__all__ = ["StandardMerkleTree", "Multiproof"]
