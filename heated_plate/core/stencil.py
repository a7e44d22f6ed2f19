"""
Jacobi stencil update.

Every interior cell of the new estimate is the average of its four axis
neighbors in the previous estimate:

    W[Central] <= (1/4) * (W[North] + W[South] + W[West] + W[East])

Only ``previous`` is read and only the interior of ``current`` is written,
so any partition of the interior rows can be updated concurrently.
"""

from __future__ import annotations

from heated_plate.core.grid_state import GridState, has_interior


def neighbor_average(previous):
    """
    Four-point average for all interior cells of ``previous``.

    Pure function of its input, returns an array of shape ``(rows-2, cols-2)``.
    The summation order (north, south, west, east) is the same in every
    backend so results agree bit for bit on the same hardware.
    """
    return (previous[:-2, 1:-1] + previous[2:, 1:-1] + previous[1:-1, :-2] + previous[1:-1, 2:]) / 4.0


def jacobi_sweep(previous, current):
    """Write the interior of ``current`` from ``previous``; the border is left untouched."""
    rows, cols = previous.shape
    if has_interior(rows, cols):
        current[1:-1, 1:-1] = neighbor_average(previous)
    return current


def jacobi_sweep_rows(previous, current, row_start: int, row_stop: int):
    """
    Sweep the interior rows ``row_start <= i < row_stop`` only.

    ``row_start`` must be >= 1 and ``row_stop`` <= rows - 1.
    """
    if row_stop <= row_start or previous.shape[1] < 3:
        return current
    current[row_start:row_stop, 1:-1] = (
        previous[row_start - 1 : row_stop - 1, 1:-1]
        + previous[row_start + 1 : row_stop + 1, 1:-1]
        + previous[row_start:row_stop, :-2]
        + previous[row_start:row_stop, 2:]
    ) / 4.0
    return current


class StencilUpdateEngine:
    """Applies one relaxation sweep to a double-buffered grid."""

    def sweep(self, grid: GridState) -> None:
        """Swap buffers, then compute the new ``current`` from ``previous``."""
        grid.swap()
        jacobi_sweep(grid.previous, grid.current)
