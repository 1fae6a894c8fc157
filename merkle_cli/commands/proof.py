"""
CLI Proof Commands

Reload a tree dump and print proofs.

Usage:
    merkle proof merkle-tree.json [--index N] [--json]
    merkle multiproof merkle-tree.json --index 0 --index 3 [--json]
    merkle render merkle-tree.json
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from merkle_cli.io import read_json
from merkle_core.merkle import StandardMerkleTree
from merkle_core.schemas.canonical import dumps_canonical
from merkle_core.schemas.dump import ProofOutput


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def load_tree_file(path: str) -> StandardMerkleTree:
    """Read and validate a dump written by the build command."""
    logger.info("Loading tree from %s", path)
    return StandardMerkleTree.load(read_json(path))


def proof_cmd(args: Namespace) -> int:
    """Handle the proof command: one entry with --index, else every entry."""
    tree = load_tree_file(args.tree)

    indices = [args.index] if args.index is not None else [i for i, _ in tree.entries()]

    outputs = [
        ProofOutput(
            index=i,
            value=tree.at(i),
            tree_index=tree.tree_index(i),
            proof=tree.get_proof(i),
        )
        for i in indices
    ]

    if args.json:
        print(dumps_canonical({"root": tree.root, "proofs": outputs}, indent=2))
        return EXIT_SUCCESS

    print(f"Merkle root: {tree.root}")
    for output in outputs:
        print(f"Entry {output.index}:")
        print(f"  Value: {json.dumps(output.value)}")
        print("  Proof:")
        for h in output.proof:
            print(f"    {h}")
    return EXIT_SUCCESS


def multiproof_cmd(args: Namespace) -> int:
    """Handle the multiproof command."""
    tree = load_tree_file(args.tree)
    multiproof = tree.get_multiproof(args.index)
    output = multiproof.to_output(tree.leaf_encoding)

    if args.json:
        print(dumps_canonical({"root": tree.root, "multiproof": output}, indent=2))
        return EXIT_SUCCESS

    print(f"Merkle root: {tree.root}")
    print("Leaves:")
    for leaf in output.leaves:
        print(f"  {json.dumps(leaf)}")
    print("Proof:")
    for h in output.proof:
        print(f"  {h}")
    print("Proof flags: " + ", ".join(str(f).lower() for f in output.proof_flags))
    return EXIT_SUCCESS


def render_cmd(args: Namespace) -> int:
    """Handle the render command."""
    tree = load_tree_file(args.tree)
    print(tree.render())
    return EXIT_SUCCESS
