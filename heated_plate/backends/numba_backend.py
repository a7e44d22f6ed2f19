"""
Numba Backend for heated_plate

Host-parallel backend using Numba JIT compilation. The sweep and the
max-reduction are ``prange`` loops over interior rows; Numba's parallel
runtime splits the rows across its thread pool, keeps a private partial
maximum per thread and combines them when the loop ends.
"""

from __future__ import annotations

import numpy as np

from heated_plate.core.boundary import REFERENCE_BOUNDARY, BoundaryRule, apply_boundary, boundary_mean

from .base_backend import BaseBackend

# Check Numba availability - raise ImportError if not available
try:
    import numba
    from numba import njit, prange
except ImportError as e:
    raise ImportError("Numba required for Numba backend. Install with: pip install 'heated_plate[numba]'") from e


@njit(parallel=True, cache=True)
def _seed_interior_kernel(field, mean):
    rows, cols = field.shape
    for i in prange(1, rows - 1):
        for j in range(1, cols - 1):
            field[i, j] = mean


@njit(parallel=True, cache=True)
def _sweep_kernel(previous, current):
    rows, cols = previous.shape
    for i in prange(1, rows - 1):
        for j in range(1, cols - 1):
            current[i, j] = (previous[i - 1, j] + previous[i + 1, j] + previous[i, j - 1] + previous[i, j + 1]) / 4.0


@njit(parallel=True, cache=True)
def _max_difference_kernel(previous, current):
    rows, cols = previous.shape
    diff = 0.0
    for i in prange(1, rows - 1):
        for j in range(1, cols - 1):
            diff = max(diff, abs(current[i, j] - previous[i, j]))
    return diff


class NumbaBackend(BaseBackend):
    """
    Numba-accelerated host-parallel backend.

    Options:
        num_threads: Numba worker threads (default: Numba's own default)
    """

    def _setup_backend(self):
        # Numba targets the host CPU
        if self.device not in ("cpu", "auto"):
            raise ValueError(f"NumbaBackend runs on the host CPU, got device='{self.device}'")
        self.device = "cpu"

        num_threads = self.config.get("num_threads")
        if num_threads:
            numba.set_num_threads(min(int(num_threads), numba.config.NUMBA_NUM_THREADS))
        self.num_threads = numba.get_num_threads()

    @property
    def name(self) -> str:
        return "numba"

    def initialize(self, workspace, rule: BoundaryRule = REFERENCE_BOUNDARY) -> float:
        field = workspace.current
        apply_boundary(field, rule)
        mean = boundary_mean(field)
        _seed_interior_kernel(field, field.dtype.type(mean))
        np.copyto(workspace.previous, field)
        return mean

    def sweep(self, workspace) -> None:
        workspace.swap()
        _sweep_kernel(workspace.previous, workspace.current)

    def max_difference(self, workspace) -> float:
        return float(_max_difference_kernel(workspace.previous, workspace.current))

    def warmup(self) -> None:
        """Trigger JIT compilation on a tiny grid so timing excludes compilation."""
        field = np.zeros((3, 3), dtype=self.numpy_dtype)
        other = np.zeros_like(field)
        _seed_interior_kernel(field, field.dtype.type(0.0))
        _sweep_kernel(field, other)
        _max_difference_kernel(field, other)

    def get_device_info(self) -> dict:
        info = super().get_device_info()
        info.update(
            {
                "numba_version": numba.__version__,
                "threading_layer": numba.config.THREADING_LAYER,
                "num_threads": self.num_threads,
                "max_threads": numba.config.NUMBA_NUM_THREADS,
            }
        )
        return info

    def describe_capabilities(self) -> list[str]:
        return [
            f"Number of processors available = {numba.config.NUMBA_NUM_THREADS}",
            f"Number of threads =              {self.num_threads}",
        ]
