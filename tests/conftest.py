"""Pytest configuration and shared fixtures for stochopt tests.

This module provides:
- A deterministic numpy RNG fixture
- Global numpy/torch seeding so every test starts from the same state
"""

import os

import numpy as np
import pytest
import torch

from stochopt.diagnostics import set_debug_enabled


def _seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    """
    return np.random.default_rng(_seed())


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Auto-use fixture to set global random seeds for reproducibility."""
    np.random.seed(_seed())
    torch.manual_seed(_seed())


@pytest.fixture(scope="function", autouse=True)
def debug_mode_off():
    """Run every test with debug mode disabled unless the test enables it."""
    set_debug_enabled(False)
    yield
    set_debug_enabled(False)
