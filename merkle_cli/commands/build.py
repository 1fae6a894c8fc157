"""
CLI Build Command

Build a tree from a JSON file of records, print the root and write the dump.

Records file: either a JSON array of records, or an object
    {"leafEncoding": ["address", "uint256"], "values": [[...], ...]}
in which case --types may be omitted.

Usage:
    merkle build records.json --types address,uint256,uint256 [--out merkle-tree.json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from typing import Any

from merkle_cli.io import CLIInputError, parse_types, read_json, write_json
from merkle_core.merkle import StandardMerkleTree


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def load_records(path: str, types_arg: str | None) -> tuple[list[Any], list[str]]:
    """Read records and the leaf encoding from the records file and --types."""
    data = read_json(path)

    if isinstance(data, dict):
        values = data.get("values")
        encoding = data.get("leafEncoding")
    else:
        values = data
        encoding = None

    if types_arg:
        encoding = parse_types(types_arg)
    if not encoding:
        raise CLIInputError("Leaf encoding missing: pass --types or a leafEncoding key")
    if not isinstance(values, list):
        raise CLIInputError("Records file must hold a JSON array of records")
    return values, list(encoding)


def build_cmd(args: Namespace) -> int:
    """Handle the build command."""
    config = args.cli_config
    values, encoding = load_records(args.records, args.types)

    sort_leaves = config.tree.sort_leaves if args.sort_leaves is None else args.sort_leaves
    hash_name = args.hash or config.tree.hash_name

    logger.info("Building tree from %d records (%s)", len(values), ",".join(encoding))
    tree = StandardMerkleTree.of(
        values,
        encoding,
        sort_leaves=sort_leaves,
        hash_name=hash_name,
    )

    out_path = write_json(args.out, tree.dump(), indent=config.output.indent)
    logger.info("Wrote tree dump to %s", out_path)

    if args.json:
        print(json.dumps({
            "root": tree.root,
            "leaves": len(tree),
            "hash": tree.hash_name,
            "out": str(out_path),
        }, indent=2))
    else:
        print(f"Merkle root: {tree.root}")
        print(f"Leaves: {len(tree)}")
        print(f"Written: {out_path}")
    return EXIT_SUCCESS
