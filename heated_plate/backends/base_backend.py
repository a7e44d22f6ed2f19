"""
Base Backend Interface for heated_plate

Defines the execution contract every backend implements. A backend decides
how the boundary initialization, the stencil sweep and the max-reduction are
parallelized and where the two buffers live while the solver iterates.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import numpy as np

from heated_plate.core.boundary import REFERENCE_BOUNDARY, BoundaryInitializer, BoundaryRule
from heated_plate.core.convergence import max_abs_difference
from heated_plate.core.grid_state import GridState
from heated_plate.core.stencil import jacobi_sweep


class DeviceGrid:
    """
    Device-resident mirror of a GridState.

    Holds the backend's own ``previous``/``current`` arrays for the lifetime
    of a ``resident()`` scope. Exposes the same ``rows``/``cols``/``swap``
    surface as GridState so backend phases work on either.
    """

    def __init__(self, previous, current):
        self.previous = previous
        self.current = current
        self.rows, self.cols = previous.shape

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.cols)

    def swap(self) -> None:
        self.previous, self.current = self.current, self.previous


class BaseBackend(ABC):
    """
    Abstract base class for execution backends.

    The default phase implementations operate in place on any array type
    that supports numpy-style slicing (numpy arrays, torch tensors). Host
    backends use the GridState buffers directly as their workspace; offload
    backends override ``acquire``/``retrieve``/``release`` to keep a
    DeviceGrid resident on the accelerator.
    """

    #: True for backends whose buffers live on an accelerator
    offload: bool = False

    #: True when ``iterate_to_convergence`` runs the whole loop on the device.
    #: Callers must check this flag first; the default method only raises.
    supports_fused_loop: bool = False

    #: printf-style format used when the final grid is written to a file
    output_format: str = "%6.2f"

    def __init__(self, device: str = "auto", precision: str = "float64", **kwargs):
        """
        Initialize backend with configuration.

        Args:
            device: Device to use ("cpu", "gpu", "cuda", "auto", ...)
            precision: Numerical precision ("float32" or "float64")
            **kwargs: Backend-specific options
        """
        if precision not in ("float32", "float64"):
            raise ValueError(f"Unsupported precision: {precision}")

        self.device = device
        self.precision = precision
        self.config = kwargs
        self._setup_backend()

    @abstractmethod
    def _setup_backend(self):
        """Backend-specific initialization."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name identifier."""

    @property
    def numpy_dtype(self) -> np.dtype:
        """Host dtype of the GridState this backend fills."""
        return np.dtype(self.precision)

    # Resource scope
    @contextmanager
    def resident(self, grid: GridState) -> Iterator[Any]:
        """
        Keep the grid's buffers resident on this backend for one solve.

        On normal exit the final buffers are retrieved into ``grid``; the
        backend's resources are released on every exit path.
        """
        workspace = self.acquire(grid)
        completed = False
        try:
            yield workspace
            completed = True
        finally:
            try:
                if completed:
                    self.retrieve(workspace, grid)
            finally:
                self.release(workspace)

    def acquire(self, grid: GridState):
        """Allocate backend storage for ``grid``. Host backends work on the grid itself."""
        return grid

    def retrieve(self, workspace, grid: GridState) -> None:
        """Copy the workspace buffers back into ``grid``."""

    def release(self, workspace) -> None:
        """Free backend storage acquired for ``workspace``."""

    def warmup(self) -> None:
        """Compile or load kernels ahead of the timed loop. Default: nothing to do."""

    # Solver phases
    def initialize(self, workspace, rule: BoundaryRule = REFERENCE_BOUNDARY) -> float:
        """Fix the border, seed the interior and mirror into ``previous``. Returns the mean."""
        mean = BoundaryInitializer(rule).apply(workspace.current)
        workspace.previous[...] = workspace.current
        return mean

    def sweep(self, workspace) -> None:
        """Swap buffers and apply one Jacobi sweep."""
        workspace.swap()
        jacobi_sweep(workspace.previous, workspace.current)

    def max_difference(self, workspace) -> float:
        """Largest absolute change over interior cells, as a host float."""
        return max_abs_difference(workspace.previous, workspace.current)

    def iterate_to_convergence(self, workspace, epsilon: float, max_iterations: int | None = None) -> tuple[int, float]:
        """
        Run the whole iterate-until-converged loop without returning to the host.

        Only defined for backends with ``supports_fused_loop`` set. Callers
        (SolverDriver) check that flag and otherwise drive ``sweep`` and
        ``max_difference`` one iteration at a time.

        Returns:
            (iterations, final diff)
        """
        raise NotImplementedError(f"{self.name} backend does not support a fused device loop")

    # Backend Information
    def get_device_info(self) -> dict:
        """Get information about current device."""
        return {
            "backend": self.name,
            "device": self.device,
            "precision": self.precision,
            "offload": self.offload,
        }

    def describe_capabilities(self) -> list[str]:
        """Human-readable capability lines for the console banner."""
        return []

    def close(self) -> None:
        """Release long-lived backend resources."""

    # Context Management
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(device={self.device!r}, precision={self.precision!r})"
