"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m merkle_cli build records.json --types address,uint256 [--out merkle-tree.json]
    python -m merkle_cli proof merkle-tree.json [--index N] [--json]
    python -m merkle_cli multiproof merkle-tree.json --index 0 --index 3 [--json]
    python -m merkle_cli verify --root 0x.. --types address,uint256 --value '[..]' --proof '[..]'
    python -m merkle_cli render merkle-tree.json
    python -m merkle_cli config --init

Environment Variables:
    MERKLE_HASH                 Hash algorithm (default: keccak256)
    MERKLE_SORT_LEAVES          Order leaves by hash (default: false)
    MERKLE_LOG_LEVEL            Log level (default: INFO)
    MERKLE_LOG_FILE             Also log to this file
    MERKLE_OUTPUT_INDENT        JSON indent for written files (0 = compact)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from merkle_cli.commands import build, proof, verify
from merkle_cli.config import CONFIG_FILE_NAME, get_default_config_template, load_config
from merkle_cli.io import CLIInputError
from merkle_core.crypto.hashing import HASH_FUNCTIONS
from merkle_core.schemas.errors import MerkleException


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def _add_output_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on error",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="merkle",
        description="Build Merkle allowlists, generate proofs and verify them offline.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to configuration file (default: ./{CONFIG_FILE_NAME})",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    hash_choices = sorted(HASH_FUNCTIONS)

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a tree from a JSON file of records",
        description="Encode and hash every record, print the root and write the tree dump.",
    )
    build_parser.add_argument(
        "records",
        type=str,
        help="JSON file: array of records, or {leafEncoding, values}",
    )
    build_parser.add_argument(
        "--types", "-t",
        type=str,
        default=None,
        help="Comma-separated leaf encoding, e.g. address,uint256",
    )
    build_parser.add_argument(
        "--out", "-o",
        type=str,
        default="merkle-tree.json",
        help="Output path for the tree dump (default: merkle-tree.json)",
    )
    build_parser.add_argument(
        "--sort-leaves",
        dest="sort_leaves",
        action="store_true",
        default=None,
        help="Order leaves by hash before building",
    )
    build_parser.add_argument(
        "--no-sort-leaves",
        dest="sort_leaves",
        action="store_false",
        help="Keep leaves in record order (default)",
    )
    build_parser.add_argument(
        "--hash",
        type=str,
        choices=hash_choices,
        default=None,
        help="Hash algorithm (default: from config or keccak256)",
    )
    _add_output_flags(build_parser)
    build_parser.set_defaults(func=build.build_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Print proofs from a tree dump",
        description="Load and validate a tree dump, then print one proof or all of them.",
    )
    proof_parser.add_argument("tree", type=str, help="Tree dump written by `build`")
    proof_parser.add_argument(
        "--index", "-i",
        type=int,
        default=None,
        help="Record index (default: every record)",
    )
    _add_output_flags(proof_parser)
    proof_parser.set_defaults(func=proof.proof_cmd)

    # --- multiproof command ---
    multiproof_parser = subparsers.add_parser(
        "multiproof",
        help="Print a multiproof for several records",
        description="Load and validate a tree dump, then prove several records at once.",
    )
    multiproof_parser.add_argument("tree", type=str, help="Tree dump written by `build`")
    multiproof_parser.add_argument(
        "--index", "-i",
        type=int,
        action="append",
        required=True,
        help="Record index (repeat for each record)",
    )
    _add_output_flags(multiproof_parser)
    multiproof_parser.set_defaults(func=proof.multiproof_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a proof or multiproof against a root",
        description="Tree-independent verification. Exit code 2 when the proof is invalid.",
    )
    verify_parser.add_argument("--root", type=str, required=True, help="Expected root (0x hex)")
    verify_parser.add_argument(
        "--types", "-t",
        type=str,
        required=True,
        help="Comma-separated leaf encoding",
    )
    verify_parser.add_argument("--value", type=str, default=None, help="Record as a JSON array")
    verify_parser.add_argument("--proof", type=str, default=None, help="Proof as a JSON array of hashes")
    verify_parser.add_argument(
        "--multiproof",
        type=str,
        default=None,
        help="JSON file with leaves, proof and proofFlags",
    )
    verify_parser.add_argument(
        "--hash",
        type=str,
        choices=hash_choices,
        default=None,
        help="Hash algorithm (default: from config or keccak256)",
    )
    _add_output_flags(verify_parser)
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- render command ---
    render_parser = subparsers.add_parser(
        "render",
        help="Print a tree dump level by level",
    )
    render_parser.add_argument("tree", type=str, help="Tree dump written by `build`")
    render_parser.add_argument("--debug", action="store_true", default=False, help="Debug mode")
    render_parser.set_defaults(func=proof.render_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default=CONFIG_FILE_NAME,
        help=f"Path for config file (default: {CONFIG_FILE_NAME})",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (MERKLE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: merkle config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except (MerkleException, CLIInputError) as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
