"""
Pytest configuration and shared fixtures for the heated_plate test suite.
"""

import pytest

import numpy as np

from heated_plate.config import PlateConfig
from heated_plate.core import GridState

# =============================================================================
# Test Configuration
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (slower, cross-component)")
    config.addinivalue_line("markers", "slow: Slow tests (may take >10 seconds)")


def pytest_collection_modifyitems(config, items):
    """Add markers based on test paths."""
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)

        if "large" in item.name or "slow" in item.name:
            item.add_marker(pytest.mark.slow)


# =============================================================================
# Grid Fixtures
# =============================================================================


@pytest.fixture
def tiny_config():
    """3x3 plate: one interior cell, converges in two sweeps at epsilon=1."""
    return PlateConfig(rows=3, cols=3, epsilon=1.0)


@pytest.fixture
def small_config():
    """Small rectangular plate for backend and driver tests."""
    return PlateConfig(rows=24, cols=17, epsilon=0.05)


@pytest.fixture
def seeded_grid():
    """8x6 GridState with random values in both buffers."""
    rng = np.random.default_rng(42)
    grid = GridState(8, 6)
    grid.load(rng.uniform(0.0, 100.0, size=(8, 6)))
    return grid


@pytest.fixture
def random_field():
    """Random 12x9 field used to compare sweep implementations."""
    rng = np.random.default_rng(7)
    return rng.uniform(0.0, 100.0, size=(12, 9))
