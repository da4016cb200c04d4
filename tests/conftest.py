"""
Pytest configuration and fixtures for the noise_modules test suite.

This file contains shared fixtures, test configuration, and utilities
used across the test suite.
"""
import os
import sys
import pytest
import numpy as np

# Add the package root to Python path for testing
package_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if package_root not in sys.path:
    sys.path.insert(0, package_root)

from noise_modules.module import NoiseModule, ALL_DIMENSIONS  # noqa: E402


class CountingSource(NoiseModule):
    """
    Stand-in source module that records every coordinate it is asked for and
    returns `fn(*coords)` (0.0 by default).
    """
    def __init__(self, fn=None, dimensions=ALL_DIMENSIONS):
        self.fn = fn or (lambda *coords: 0.0)
        self.capabilities = frozenset(dimensions)
        self.calls = []

    @property
    def call_count(self):
        return len(self.calls)

    def _evaluate(self, coords):
        self.calls.append(coords)
        return self.fn(*coords)


def pytest_collection_modifyitems(config, items):
    """Mark tests by the directory they live in."""
    for item in items:
        path = str(item.fspath)
        if os.sep + "unit" + os.sep in path:
            item.add_marker("unit")
        elif os.sep + "integration" + os.sep in path:
            item.add_marker("integration")


@pytest.fixture
def counting_source():
    """A call-recording source that returns 0.0 everywhere."""
    return CountingSource()


@pytest.fixture
def make_counting_source():
    """Factory for call-recording sources with a custom value function."""
    return CountingSource


@pytest.fixture(scope="session")
def sample_points():
    """Provide reproducible 4D sample coordinates for tests."""
    rng = np.random.default_rng(42)
    return rng.uniform(-64.0, 64.0, size=(200, 4))


@pytest.fixture(scope="session")
def large_sample_points():
    """Provide a large uniform coordinate sample for range checks."""
    rng = np.random.default_rng(1234)
    return rng.uniform(-256.0, 256.0, size=(10000, 4))
