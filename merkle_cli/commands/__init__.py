"""
CLI command modules.
"""

from merkle_cli.commands import build, proof, verify

__all__ = ["build", "proof", "verify"]
