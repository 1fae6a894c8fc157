"""
Merkle Tree Implementation
Deterministic tree construction and proof generation over leaf hashes.

This module provides:
- MerkleTree.build: bottom-up construction from an ordered list of leaf hashes
- Single-leaf proofs (sibling path, bottom-up)
- Multiproofs (shared siblings emitted once, plus combination flags)
- Structural helpers (level sizes, slot arithmetic, validation, rendering)

Canonical Commitment Rules (Hard Contracts):
1. Leaf order: the order of the input is the canonical index order.
   This module never sorts leaves.
2. Parent hashing: parent = H(min(left, right) || max(left, right))
3. Padding rule: if a level has an odd number of nodes, its last node is
   paired with itself
4. Empty input: rejected with EmptyTreeError
5. Single leaf: root = leaf (no hashing at all)

Storage Layout:
- Nodes live in one flat tuple, level by level: leaves first (slot i holds
  leaf i), root last.
- Level k starts at offset sum(level_sizes[:k]); the node at (k, pos) has
  its parent at (k + 1, pos // 2) and its sibling at (k, pos ^ 1), or
  itself when pos ^ 1 falls past the end of the level.
"""
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from merkle_core.crypto.hashing import (
    DEFAULT_HASH,
    HASH_SIZE,
    get_hash_function,
    hash_pair,
    to_hex,
)
from merkle_core.merkle.nodes import InternalNode, LeafNode, Node
from merkle_core.merkle.proofs import HashMultiproof
from merkle_core.schemas.errors import (
    CorruptedTreeError,
    EmptyTreeError,
    IndexOutOfRangeError,
    InvalidArgumentError,
)


logger = logging.getLogger(__name__)


def level_sizes(leaf_count: int) -> list[int]:
    """
    Number of nodes on every level, leaves first.

    Example:
        >>> level_sizes(5)
        [5, 3, 2, 1]
    """
    if leaf_count < 1:
        raise EmptyTreeError()
    sizes = [leaf_count]
    while sizes[-1] > 1:
        sizes.append((sizes[-1] + 1) // 2)
    return sizes


def tree_size(leaf_count: int) -> int:
    """Length of the flat node array for a tree with ``leaf_count`` leaves."""
    return sum(level_sizes(leaf_count))


def compute_tree_depth(leaf_count: int) -> int:
    """
    Number of hashing levels above the leaves.

    This is also the length of every single-leaf proof. A single leaf has
    depth 0; five leaves have depth 3.
    """
    return len(level_sizes(leaf_count)) - 1


class MerkleTree:
    """
    Immutable binary Merkle tree over 32-byte leaf hashes.

    Use MerkleTree.build() to construct one. Instances are never mutated;
    rebuilding means constructing a new tree.

    Example:
        >>> tree = MerkleTree.build([keccak256(b"a"), keccak256(b"b")])
        >>> tree.get_proof(0) == [keccak256(b"b")]
        True
    """

    def __init__(
        self,
        nodes: Sequence[Node],
        sizes: Sequence[int],
        hash_name: str = DEFAULT_HASH,
    ) -> None:
        self._nodes: tuple[Node, ...] = tuple(nodes)
        self._level_sizes: tuple[int, ...] = tuple(sizes)
        self._hash_name = hash_name

        offsets = []
        start = 0
        for size in self._level_sizes:
            offsets.append(start)
            start += size
        self._offsets: tuple[int, ...] = tuple(offsets)

        if start != len(self._nodes):
            raise CorruptedTreeError(
                f"Node array has {len(self._nodes)} entries, expected {start}",
                details={"expected": start, "actual": len(self._nodes)},
            )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def build(
        cls,
        leaves: Sequence[bytes],
        hash_name: str = DEFAULT_HASH,
    ) -> "MerkleTree":
        """
        Build a tree from leaf hashes.

        Algorithm:
        1. Place leaves at slots 0..n-1 in input order
        2. While the current level has more than one node:
           - Pair adjacent nodes; an odd last node is paired with itself
           - Append the parents as the next level
        3. The single remaining node is the root

        Example: [a, b, c] -> [H(a,b), H(c,c)] -> [root]

        Args:
            leaves: Ordered 32-byte leaf hashes
            hash_name: Hash algorithm for internal nodes

        Returns:
            The built tree

        Raises:
            EmptyTreeError: If leaves is empty
            InvalidArgumentError: If a leaf is not a 32-byte hash
        """
        if len(leaves) == 0:
            raise EmptyTreeError()

        hash_fn = get_hash_function(hash_name)

        nodes: list[Node] = []
        for position, leaf in enumerate(leaves):
            if not isinstance(leaf, (bytes, bytearray)) or len(leaf) != HASH_SIZE:
                raise InvalidArgumentError(
                    f"Leaf {position} is not a {HASH_SIZE}-byte hash",
                    details={"position": position},
                )
            nodes.append(LeafNode(hash=bytes(leaf), position=position))

        sizes = level_sizes(len(nodes))
        level_start = 0
        for size in sizes[:-1]:
            for pos in range(0, size, 2):
                left = level_start + pos
                right = left + 1 if pos + 1 < size else left
                parent = hash_pair(nodes[left].hash, nodes[right].hash, hash_fn)
                nodes.append(InternalNode(hash=parent, left=left, right=right))
            level_start += size

        tree = cls(nodes, sizes, hash_name)
        logger.debug(
            "Built Merkle tree: %d leaves, %d nodes, root=%s",
            len(leaves), len(nodes), to_hex(tree.root),
        )
        return tree

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def root(self) -> bytes:
        return self._nodes[-1].hash

    @property
    def hash_name(self) -> str:
        return self._hash_name

    @property
    def leaf_count(self) -> int:
        return self._level_sizes[0]

    @property
    def size(self) -> int:
        """Total number of stored nodes."""
        return len(self._nodes)

    @property
    def depth(self) -> int:
        return len(self._level_sizes) - 1

    @property
    def level_sizes(self) -> tuple[int, ...]:
        return self._level_sizes

    def __len__(self) -> int:
        return self.leaf_count

    def node(self, slot: int) -> Node:
        """Return the node stored at a flat-array slot."""
        if not 0 <= slot < len(self._nodes):
            raise IndexOutOfRangeError(
                f"Node slot {slot} out of range for {len(self._nodes)} nodes",
                index=slot,
            )
        return self._nodes[slot]

    def hashes(self) -> list[bytes]:
        """Flat node-hash array in storage order."""
        return [node.hash for node in self._nodes]

    def leaf_hashes(self) -> list[bytes]:
        return [node.hash for node in self._nodes[: self.leaf_count]]

    def leaf_hash(self, position: int) -> bytes:
        return self._nodes[self.leaf_slot(position)].hash

    def leaf_slot(self, position: int) -> int:
        """Slot of the leaf at ``position`` (leaves occupy the first slots)."""
        self._check_position(position)
        return position

    def is_leaf_slot(self, slot: int) -> bool:
        return 0 <= slot < self.leaf_count

    def _locate(self, slot: int) -> tuple[int, int]:
        self.node(slot)
        for level in range(len(self._offsets) - 1, -1, -1):
            if slot >= self._offsets[level]:
                return level, slot - self._offsets[level]
        raise AssertionError("unreachable")

    def parent_slot(self, slot: int) -> int | None:
        """Slot of the parent, or None for the root."""
        level, pos = self._locate(slot)
        if level == self.depth:
            return None
        return self._offsets[level + 1] + pos // 2

    def sibling_slot(self, slot: int) -> int | None:
        """
        Slot of the node this one is paired with.

        Returns the node's own slot when it is the odd last node of its
        level, and None for the root.
        """
        level, pos = self._locate(slot)
        if level == self.depth:
            return None
        sibling = pos ^ 1
        if sibling >= self._level_sizes[level]:
            sibling = pos
        return self._offsets[level] + sibling

    def _check_position(self, position: int) -> None:
        if isinstance(position, bool) or not isinstance(position, int):
            raise IndexOutOfRangeError(
                f"Leaf index must be an integer, got {type(position).__name__}"
            )
        if not 0 <= position < self.leaf_count:
            raise IndexOutOfRangeError(
                f"Leaf index {position} out of range for {self.leaf_count} leaves",
                index=position,
                leaf_count=self.leaf_count,
            )

    # ------------------------------------------------------------------
    # Proofs
    # ------------------------------------------------------------------

    def get_proof(self, position: int) -> list[bytes]:
        """
        Generate the sibling path for the leaf at ``position``.

        At each level the sibling hash is recorded (the node's own hash when
        it was paired with itself), bottom-up. The proof always has
        ``depth`` entries.

        Raises:
            IndexOutOfRangeError: If position is not a valid leaf
        """
        self._check_position(position)

        proof: list[bytes] = []
        pos = position
        for level, size in enumerate(self._level_sizes[:-1]):
            sibling = pos ^ 1
            if sibling >= size:
                sibling = pos
            proof.append(self._nodes[self._offsets[level] + sibling].hash)
            pos //= 2
        return proof

    def get_multiproof(self, positions: Iterable[int]) -> HashMultiproof:
        """
        Generate one proof covering several leaves.

        Positions are de-duplicated and sorted. Level by level, left to
        right, each frontier node is combined with its sibling:
        - sibling also in the frontier -> flag True, nothing emitted
        - otherwise -> flag False, sibling hash appended to the proof
          (the node's own hash when it was paired with itself)
        The parents form the next frontier.

        Raises:
            InvalidArgumentError: If no positions are given
            IndexOutOfRangeError: If any position is not a valid leaf
        """
        requested = list(positions)
        if not requested:
            raise InvalidArgumentError("Multiproof requires at least one leaf index")
        for position in requested:
            self._check_position(position)

        frontier = sorted(set(requested))
        leaves = [self._nodes[pos].hash for pos in frontier]
        proof: list[bytes] = []
        proof_flags: list[bool] = []

        for level, size in enumerate(self._level_sizes[:-1]):
            offset = self._offsets[level]
            next_frontier: list[int] = []
            i = 0
            while i < len(frontier):
                pos = frontier[i]
                sibling = pos ^ 1
                if sibling > pos and i + 1 < len(frontier) and frontier[i + 1] == sibling:
                    proof_flags.append(True)
                    i += 2
                else:
                    if sibling >= size:
                        sibling = pos
                    proof.append(self._nodes[offset + sibling].hash)
                    proof_flags.append(False)
                    i += 1
                next_frontier.append(pos // 2)
            frontier = next_frontier

        logger.debug(
            "Multiproof for %d leaves: %d proof hashes, %d flags",
            len(leaves), len(proof), len(proof_flags),
        )
        return HashMultiproof(
            leaves=leaves,
            proof=proof,
            proof_flags=proof_flags,
            positions=sorted(set(requested)),
        )

    # ------------------------------------------------------------------
    # Integrity
    # ------------------------------------------------------------------

    def validate(self) -> None:
        """
        Recompute every internal node from its children.

        Raises:
            CorruptedTreeError: On the first node whose hash or wiring does
                not match
        """
        hash_fn = get_hash_function(self._hash_name)
        level_start = 0
        slot = self.leaf_count
        for size in self._level_sizes[:-1]:
            for pos in range(0, size, 2):
                left = level_start + pos
                right = left + 1 if pos + 1 < size else left
                node = self._nodes[slot]
                if not isinstance(node, InternalNode) or (node.left, node.right) != (left, right):
                    raise CorruptedTreeError(
                        f"Node {slot} is not wired to children ({left}, {right})",
                        details={"slot": slot},
                    )
                expected = hash_pair(self._nodes[left].hash, self._nodes[right].hash, hash_fn)
                if node.hash != expected:
                    raise CorruptedTreeError(
                        f"Node {slot} hash does not match its children",
                        details={"slot": slot},
                    )
                slot += 1
            level_start += size

    def render(self) -> str:
        """
        Human-readable dump of every level, root first.

        Example for three leaves:
            level 2 (root)
              5) 0x...  <- 3, 4
            level 1
              3) 0x...  <- 0, 1
              4) 0x...  <- 2, 2
            level 0 (leaves)
              ...
        """
        lines: list[str] = []
        for level in range(self.depth, -1, -1):
            label = f"level {level}"
            if level == self.depth:
                label += " (root)"
            if level == 0:
                label += " (leaves)"
            lines.append(label)
            offset = self._offsets[level]
            for slot in range(offset, offset + self._level_sizes[level]):
                node = self._nodes[slot]
                line = f"  {slot}) {to_hex(node.hash)}"
                if isinstance(node, InternalNode):
                    line += f"  <- {node.left}, {node.right}"
                lines.append(line)
        return "\n".join(lines)


__all__ = [
    "MerkleTree",
    "level_sizes",
    "tree_size",
    "compute_tree_depth",
]
