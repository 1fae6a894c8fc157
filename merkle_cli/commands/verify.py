"""
CLI Verify Command

Check a proof against a root without the tree:
- single proof: --value and --proof
- multiproof: --multiproof FILE (output of `merkle multiproof --json`)

Usage:
    merkle verify --root 0x... --types address,uint256 --value '["0x..", "5"]' --proof '["0x.."]'
    merkle verify --root 0x... --types address,uint256 --multiproof multiproof.json
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from merkle_cli.io import CLIInputError, parse_json_arg, parse_types, read_json
from merkle_core.merkle import Multiproof, StandardMerkleTree


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def load_multiproof(path: str) -> Multiproof:
    """Read a multiproof file; accepts the bare object or {"multiproof": {...}}."""
    data = read_json(path)
    if isinstance(data, dict) and "multiproof" in data:
        data = data["multiproof"]
    if not isinstance(data, dict):
        raise CLIInputError(f"Multiproof file must hold a JSON object: {path}")

    try:
        return Multiproof(
            leaves=list(data["leaves"]),
            proof=list(data["proof"]),
            proof_flags=list(data["proofFlags"]),
        )
    except (KeyError, TypeError) as e:
        raise CLIInputError(f"Multiproof file is missing leaves/proof/proofFlags: {e}") from e


def verify_cmd(args: Namespace) -> int:
    """Handle the verify command."""
    config = args.cli_config
    encoding = parse_types(args.types)
    hash_name = args.hash or config.tree.hash_name

    if args.multiproof:
        multiproof = load_multiproof(args.multiproof)
        ok = StandardMerkleTree.verify_multiproof(args.root, encoding, multiproof, hash_name=hash_name)
        kind = "multiproof"
    else:
        if args.value is None or args.proof is None:
            raise CLIInputError("Pass --value and --proof, or --multiproof FILE")
        value = parse_json_arg(args.value, "value")
        proof = parse_json_arg(args.proof, "proof")
        if not isinstance(proof, list):
            raise CLIInputError("--proof must be a JSON array of hashes")
        ok = StandardMerkleTree.verify(args.root, encoding, value, proof, hash_name=hash_name)
        kind = "proof"

    logger.info("Verified %s against %s: %s", kind, args.root, ok)

    if args.json:
        print(json.dumps({"root": args.root, "kind": kind, "valid": ok}, indent=2))
    else:
        print("VALID" if ok else "INVALID")

    return EXIT_SUCCESS if ok else EXIT_VERIFICATION_FAILED
