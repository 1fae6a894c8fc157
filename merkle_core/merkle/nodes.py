"""
Tree node variants.

A tree is a flat tuple of nodes addressed by integer slot. Nodes never hold
references to other node objects; an internal node names its children by
slot, so the tuple is the sole owner of every node.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class LeafNode:
    """
    A leaf committing to one input hash.

    Attributes:
        hash: The leaf hash (32 bytes)
        position: 0-based position in the leaf sequence the tree was built from
    """
    hash: bytes
    position: int


@dataclass(frozen=True)
class InternalNode:
    """
    A parent of two children.

    ``left == right`` when the level below had an odd count and its last
    node was paired with itself.
    """
    hash: bytes
    left: int
    right: int

    @property
    def is_duplicated(self) -> bool:
        return self.left == self.right


Node = Union[LeafNode, InternalNode]


__all__ = ["LeafNode", "InternalNode", "Node"]
