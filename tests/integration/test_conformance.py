"""
Integration tests: cross-backend conformance.

Every available backend must produce the same converged grid as the NumPy
reference up to floating-point rounding.
"""

import pytest

import numpy as np

from heated_plate.backends import ThreadedBackend, get_available_backends
from heated_plate.conformance import compare_backends
from heated_plate.config import PlateConfig


@pytest.fixture
def conformance_config():
    return PlateConfig(rows=40, cols=33, epsilon=0.01, device="cpu")


def _optional_backends():
    available = get_available_backends()
    return [name for name in ("numba", "torch", "jax") if available[name]]


class TestHostConformance:
    def test_threaded_matches_numpy(self, conformance_config):
        report = compare_backends(conformance_config, ["numpy", "threaded"])
        assert report.reference == "numpy"
        assert report.passed()
        comparison = report.comparisons[0]
        assert comparison.iterations == report.reference_iterations
        assert comparison.max_abs_diff == 0.0

    def test_thread_counts_agree(self, conformance_config):
        backends = [ThreadedBackend(num_threads=n) for n in (1, 2, 5)]
        report = compare_backends(conformance_config, backends)
        assert set(report.solutions) == {"threaded", "threaded#1", "threaded#2"}
        assert report.passed(rtol=0.0)

    def test_summary_text(self, conformance_config):
        report = compare_backends(conformance_config, ["numpy", "threaded"])
        text = report.summary()
        assert text.startswith("Reference: numpy")
        assert "threaded" in text

    def test_requires_a_backend(self, conformance_config):
        with pytest.raises(ValueError):
            compare_backends(conformance_config, [])

    def test_iteration_drift(self, conformance_config):
        report = compare_backends(conformance_config, ["numpy", "threaded"])
        report.comparisons[0].iterations += 1
        assert not report.passed()
        assert report.passed(allow_iteration_drift=1)


class TestAcceleratedConformance:
    @pytest.mark.parametrize("backend", ["numba", "torch", "jax"])
    def test_matches_numpy(self, conformance_config, backend):
        if backend not in _optional_backends():
            pytest.skip(f"{backend} not installed")
        report = compare_backends(conformance_config, ["numpy", backend])
        assert report.passed(rtol=1e-9, allow_iteration_drift=1)
        np.testing.assert_allclose(
            report.solutions[backend].grid, report.solutions["numpy"].grid, rtol=1e-9, atol=1e-9
        )
