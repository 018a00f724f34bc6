"""Pytest configuration for lumenforge tests.

Provides a seeded random generator so stochastic tests are reproducible.
"""

import pytest

from lumenforge.sampling import make_rng


@pytest.fixture
def rng():
    """A freshly seeded generator for each test."""
    return make_rng(1234)
