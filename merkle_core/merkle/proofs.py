"""
Merkle Proof Verification
Root recomputation from leaf hashes plus proofs. No tree object needed.

This module provides:
- HashMultiproof: leaves + proof hashes + combination flags
- process_proof / process_multiproof: recompute a candidate root
- verify_proof / verify_multiproof: compare the candidate to a root

Multiproof replay:
    A FIFO queue holds the proved leaves first, then every hash computed so
    far. For each flag, the first operand is the next queue entry; the
    second is the next queue entry when the flag is True, or the next proof
    hash when it is False. The last computed hash is the root.

Error Semantics:
- process_* raise MalformedProofError when the input cannot be replayed
  (no leaves, wrong hash sizes, inconsistent counts, underflow or
  leftover proof)
- verify_* never raise for such input; they reject it with False
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from merkle_core.crypto.hashing import DEFAULT_HASH, HASH_SIZE, get_hash_function, hash_pair
from merkle_core.schemas.errors import MalformedProofError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HashMultiproof:
    """
    A proof for several leaves at once.

    Attributes:
        leaves: Proved leaf hashes, in ascending leaf position
        proof: Sibling hashes not derivable from the proved leaves
        proof_flags: One flag per combination step
        positions: Leaf positions of ``leaves`` (informational; the
            verifier does not need them)
    """
    leaves: list[bytes]
    proof: list[bytes]
    proof_flags: list[bool]
    positions: list[int] = field(default_factory=list)


def _check_hashes(values: Sequence[bytes], what: str) -> None:
    for i, value in enumerate(values):
        if not isinstance(value, (bytes, bytearray)) or len(value) != HASH_SIZE:
            raise MalformedProofError(
                f"{what}[{i}] is not a {HASH_SIZE}-byte hash",
                details={"field": what, "index": i},
            )


def process_proof(
    leaf: bytes,
    proof: Sequence[bytes],
    hash_name: str = DEFAULT_HASH,
) -> bytes:
    """
    Fold a single-leaf proof into a candidate root.

    Raises:
        MalformedProofError: If the leaf or any proof element is not a hash
    """
    _check_hashes([leaf], "leaf")
    _check_hashes(proof, "proof")
    hash_fn = get_hash_function(hash_name)

    computed = bytes(leaf)
    for sibling in proof:
        computed = hash_pair(computed, bytes(sibling), hash_fn)
    return computed


def process_multiproof(
    leaves: Sequence[bytes],
    proof: Sequence[bytes],
    proof_flags: Sequence[bool],
    hash_name: str = DEFAULT_HASH,
) -> bytes:
    """
    Replay a multiproof into a candidate root.

    Raises:
        MalformedProofError: If no leaves are given, the counts are
            inconsistent, or the replay runs out of operands / leaves
            proof hashes unused
    """
    _check_hashes(leaves, "leaves")
    _check_hashes(proof, "proof")
    if not leaves:
        raise MalformedProofError("Multiproof must prove at least one leaf")
    if any(not isinstance(flag, bool) for flag in proof_flags):
        raise MalformedProofError("proof_flags must contain only booleans")

    if len(leaves) + len(proof) != len(proof_flags) + 1:
        raise MalformedProofError(
            "Multiproof counts are inconsistent: "
            f"{len(leaves)} leaves + {len(proof)} proof hashes != "
            f"{len(proof_flags)} flags + 1",
            details={
                "leaves": len(leaves),
                "proof": len(proof),
                "proof_flags": len(proof_flags),
            },
        )

    hash_fn = get_hash_function(hash_name)
    hashes: list[bytes] = []
    leaf_pos = 0
    hash_pos = 0
    proof_pos = 0

    def next_from_queue() -> bytes:
        nonlocal leaf_pos, hash_pos
        if leaf_pos < len(leaves):
            leaf_pos += 1
            return bytes(leaves[leaf_pos - 1])
        if hash_pos < len(hashes):
            hash_pos += 1
            return hashes[hash_pos - 1]
        raise MalformedProofError("Multiproof replay ran out of leaves and hashes")

    for step, flag in enumerate(proof_flags):
        a = next_from_queue()
        if flag:
            b = next_from_queue()
        else:
            if proof_pos >= len(proof):
                raise MalformedProofError(
                    f"Multiproof replay ran out of proof hashes at step {step}"
                )
            b = bytes(proof[proof_pos])
            proof_pos += 1
        hashes.append(hash_pair(a, b, hash_fn))

    if proof_pos != len(proof):
        raise MalformedProofError(
            f"Multiproof left {len(proof) - proof_pos} proof hashes unused"
        )

    return hashes[-1] if hashes else bytes(leaves[0])


def verify_proof(
    root: bytes,
    leaf: bytes,
    proof: Sequence[bytes],
    hash_name: str = DEFAULT_HASH,
) -> bool:
    """
    Check that ``leaf`` is included under ``root``.

    Returns False for proofs that do not reconstruct the root and for
    structurally malformed proofs.
    """
    try:
        return process_proof(leaf, proof, hash_name) == root
    except MalformedProofError as e:
        logger.debug("Rejected malformed proof: %s", e.message)
        return False


def verify_multiproof(
    root: bytes,
    leaves: Sequence[bytes],
    proof: Sequence[bytes],
    proof_flags: Sequence[bool],
    hash_name: str = DEFAULT_HASH,
) -> bool:
    """
    Check that every leaf in ``leaves`` is included under ``root``.

    Returns False for mismatching and for structurally malformed input.
    """
    try:
        return process_multiproof(leaves, proof, proof_flags, hash_name) == root
    except MalformedProofError as e:
        logger.debug("Rejected malformed multiproof: %s", e.message)
        return False


__all__ = [
    "HashMultiproof",
    "process_proof",
    "process_multiproof",
    "verify_proof",
    "verify_multiproof",
]
