"""
JAX Backend for heated_plate

Accelerator-offload backend using XLA. Buffers are placed on the target
device once and every phase is a jitted function of device arrays. With
``fused_loop=True`` (the default) the whole iterate-until-converged loop is
a single ``jax.lax.while_loop``: initialization happens on the device, the
sweep, the reduction and the loop test never leave it, and only the terminal
buffers, the iteration count and the last ``diff`` are fetched.
"""

from __future__ import annotations

from functools import partial

import numpy as np

from heated_plate.core.boundary import REFERENCE_BOUNDARY, BoundaryRule, boundary_cell_count
from heated_plate.core.grid_state import has_interior
from heated_plate.core.stencil import neighbor_average
from heated_plate.utils.exceptions import ResourceExhaustedError
from heated_plate.utils.logging import get_logger

from .base_backend import BaseBackend, DeviceGrid

try:
    import jax
    import jax.numpy as jnp
    from jax import lax
except ImportError as e:
    raise ImportError("JAX backend requested but JAX is not installed. Install with: pip install 'heated_plate[jax]'") from e

logger = get_logger(__name__)


@jax.jit
def _seeded_field(field, top, bottom, left, right):
    """Functional boundary initialization; returns the seeded field and the mean."""
    rows, cols = field.shape
    field = field.at[1:-1, 0].set(left)
    field = field.at[1:-1, -1].set(right)
    field = field.at[-1, :].set(bottom)
    field = field.at[0, :].set(top)

    total = field[1:-1, 0].sum() + field[1:-1, -1].sum() + field[-1, :].sum() + field[0, :].sum()
    count = boundary_cell_count(rows, cols)
    mean = total / count if count > 0 else jnp.zeros((), field.dtype)
    return field.at[1:-1, 1:-1].set(mean), mean


def _relax(previous):
    rows, cols = previous.shape
    if not has_interior(rows, cols):
        return previous
    return previous.at[1:-1, 1:-1].set(neighbor_average(previous))


def _max_change(previous, current):
    rows, cols = previous.shape
    if not has_interior(rows, cols):
        return jnp.zeros((), previous.dtype)
    return jnp.max(jnp.abs(current[1:-1, 1:-1] - previous[1:-1, 1:-1]))


_relax_jit = jax.jit(_relax)
_max_change_jit = jax.jit(_max_change)


@partial(jax.jit, static_argnames=("max_iterations",))
def _fused_loop(field, epsilon, max_iterations=None):
    """Iterate on the device until ``diff < epsilon`` (or the cap); returns (previous, current, diff, iterations)."""

    def keep_going(carry):
        _, _, diff, iterations = carry
        proceed = epsilon <= diff
        if max_iterations is not None:
            proceed = proceed & (iterations < max_iterations)
        return proceed

    def body(carry):
        _, current, _, iterations = carry
        new = _relax(current)
        return current, new, _max_change(current, new), iterations + 1

    # diff starts at epsilon so at least one sweep always runs
    start = (field, field, jnp.asarray(epsilon, field.dtype), jnp.asarray(0, jnp.int32))
    return lax.while_loop(keep_going, body, start)


class JAXBackend(BaseBackend):
    """
    JAX-based offload backend with GPU support.

    Options:
        fused_loop: Run the whole loop on the device (default: True)
    """

    offload = True
    output_format = "%f"

    def _setup_backend(self):
        self._use_precision()
        self.dtype = jnp.float64 if self.precision == "float64" else jnp.float32
        self.supports_fused_loop = bool(self.config.get("fused_loop", True))

        devices = jax.devices()
        gpu_devices = [d for d in devices if d.platform in ("gpu", "cuda", "rocm")]
        if self.device == "auto":
            if gpu_devices:
                self.target_device = gpu_devices[0]
                self.device = "gpu"
            else:
                self.target_device = devices[0]
                self.device = devices[0].platform
        elif self.device == "gpu":
            if not gpu_devices:
                raise RuntimeError("GPU requested but no GPU devices available")
            self.target_device = gpu_devices[0]
        else:
            matching = [d for d in devices if d.platform == self.device]
            self.target_device = matching[0] if matching else devices[0]

        self._gpu_count = len(gpu_devices)
        logger.info(f"JAX backend on {self.target_device} ({self.precision})")

    def _use_precision(self) -> None:
        # x64 is process-wide in JAX; another backend may have flipped it since construction
        jax.config.update("jax_enable_x64", self.precision == "float64")

    @property
    def name(self) -> str:
        return "jax"

    def acquire(self, grid):
        self._use_precision()
        try:
            field = jax.device_put(jnp.zeros(grid.shape, dtype=self.dtype), self.target_device)
        except MemoryError as e:
            raise ResourceExhaustedError("device grid buffers", grid.shape, backend_name=self.name, cause=str(e)) from e
        except RuntimeError as e:
            if "RESOURCE_EXHAUSTED" not in str(e) and "out of memory" not in str(e).lower():
                raise
            raise ResourceExhaustedError("device grid buffers", grid.shape, backend_name=self.name, cause=str(e)) from e
        return DeviceGrid(field, field)

    def retrieve(self, workspace: DeviceGrid, grid) -> None:
        current, previous = jax.device_get((workspace.current, workspace.previous))
        grid.current[...] = np.asarray(current, dtype=grid.dtype)
        grid.previous[...] = np.asarray(previous, dtype=grid.dtype)

    def release(self, workspace: DeviceGrid) -> None:
        workspace.previous = None
        workspace.current = None

    def initialize(self, workspace: DeviceGrid, rule: BoundaryRule = REFERENCE_BOUNDARY) -> float:
        self._use_precision()
        field, mean = _seeded_field(workspace.current, rule.top, rule.bottom, rule.left, rule.right)
        workspace.previous = field
        workspace.current = field
        return float(mean)

    def sweep(self, workspace: DeviceGrid) -> None:
        self._use_precision()
        workspace.previous = workspace.current
        workspace.current = _relax_jit(workspace.previous)

    def max_difference(self, workspace: DeviceGrid) -> float:
        self._use_precision()
        return float(_max_change_jit(workspace.previous, workspace.current))

    def iterate_to_convergence(self, workspace: DeviceGrid, epsilon: float, max_iterations: int | None = None):
        self._use_precision()
        previous, current, diff, iterations = _fused_loop(workspace.current, epsilon, max_iterations=max_iterations)
        workspace.previous = previous
        workspace.current = current
        return int(iterations), float(diff)

    def get_device_info(self) -> dict:
        info = super().get_device_info()
        info.update(
            {
                "jax_version": jax.__version__,
                "target_device": str(self.target_device),
                "devices": [str(d) for d in jax.devices()],
                "fused_loop": self.supports_fused_loop,
            }
        )
        return info

    def describe_capabilities(self) -> list[str]:
        return [
            f"Number of available offload devices = {self._gpu_count}",
            f"Offload target = {self.target_device}",
        ]
