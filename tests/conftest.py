"""
Pytest configuration and shared fixtures for layertree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Isolates tests from LAYERTREE_* environment variables
3. Provides commonly-used fixtures via pytest's autodiscovery
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

from layertree.config.runtime import TreeConfig, set_default_config  # noqa: E402

from fixtures.trees import make_elements  # noqa: E402


_ENV_VARS = (
    "LAYERTREE_HASH_ALGORITHM",
    "LAYERTREE_DUPLICATE_POLICY",
    "LAYERTREE_CHECK_INVARIANTS",
    "LAYERTREE_LOG_LEVEL",
)


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Run every test against default configuration, ignoring the environment."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


@pytest.fixture
def strict_config():
    """Configuration that validates the whole tree after every mutation."""
    return TreeConfig(check_invariants=True)


@pytest.fixture
def reject_config():
    """Configuration that refuses ambiguous leaf lookups."""
    return TreeConfig(duplicate_policy="reject")


@pytest.fixture
def elements():
    """Provide a default list of nine distinct elements."""
    return make_elements(9)
