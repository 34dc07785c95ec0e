"""Pytest configuration and shared fixtures for qfocus tests.

This module provides deterministic RNG fixtures for numpy and torch so that
sampling tests are reproducible.
"""

import os

import numpy as np
import pytest
import torch

_SEED = int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG (seed from TEST_RNG_SEED, default 0)."""
    return np.random.default_rng(_SEED)


@pytest.fixture(scope="function")
def torch_rng() -> torch.Generator:
    """Provide a deterministic CPU torch.Generator for sampling calls."""
    generator = torch.Generator(device="cpu")
    generator.manual_seed(_SEED)
    return generator


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Seed global numpy and torch RNGs before every test."""
    np.random.seed(_SEED)
    torch.manual_seed(_SEED)
    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(_SEED)
