"""
Pytest configuration and shared fixtures for streamtree tests.

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

_merkle = importlib.import_module("fixtures.merkle_fixtures")

make_values = _merkle.make_values
make_accumulator = _merkle.make_accumulator

from core.config.runtime import ENV_PREFIX, set_default_config
from core.merkle import RecordingEventSink, StreamingMerkleAccumulator


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def accumulator():
    """Provide an empty accumulator with default settings."""
    return StreamingMerkleAccumulator()


@pytest.fixture
def four_leaf_accumulator():
    """Provide an accumulator holding "1 transaction" .. "4 transaction"."""
    return make_accumulator(4)


@pytest.fixture
def recording_sink():
    """Provide an in-memory event sink."""
    return RecordingEventSink()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every STREAMTREE_* variable and reset the default config."""
    import os

    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    set_default_config(None)
    yield monkeypatch
    set_default_config(None)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
