"""
merkle-allowlist CLI

Command-line interface for building Merkle allowlists and working with proofs.

Usage:
    python -m merkle_cli build records.json --types address,uint256
    python -m merkle_cli proof merkle-tree.json --index 2
    python -m merkle_cli verify --root 0x.. --types address,uint256 --value '[..]' --proof '[..]'
"""

__version__ = "0.1.0"
