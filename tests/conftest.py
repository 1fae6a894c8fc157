"""
Pytest configuration and shared fixtures for merkle-allowlist tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_allowlist_records = _common.make_allowlist_records
make_standard_tree = _common.make_standard_tree
make_hash_tree = _common.make_hash_tree


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def allowlist_records():
    """The five-address allowlist records."""
    return make_allowlist_records()


@pytest.fixture
def allowlist_tree():
    """StandardMerkleTree over the five-address allowlist."""
    return make_standard_tree()


@pytest.fixture
def allowlist_dump(allowlist_tree):
    """dump() output of the five-address allowlist tree."""
    return allowlist_tree.dump()


@pytest.fixture
def hash_tree():
    """MerkleTree over seven synthetic leaf hashes."""
    return make_hash_tree(7)


@pytest.fixture(autouse=True)
def _clear_merkle_env(monkeypatch):
    """Keep MERKLE_* variables from the developer's shell out of tests."""
    for name in (
        "MERKLE_HASH",
        "MERKLE_SORT_LEAVES",
        "MERKLE_LOG_LEVEL",
        "MERKLE_LOG_FILE",
        "MERKLE_OUTPUT_INDENT",
    ):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
