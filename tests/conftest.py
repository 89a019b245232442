"""Pytest configuration and fixtures."""

import random

import pytest

SEED = 20240601


@pytest.fixture
def rng() -> random.Random:
    """Seeded random generator for property sweeps (reproducible across runs)."""
    return random.Random(SEED)
