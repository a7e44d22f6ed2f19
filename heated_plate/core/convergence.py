"""
Convergence reduction: the largest absolute change over interior cells.

Maximum is associative and commutative, so the reduction can be split into
per-partition partial maxima and merged in any order without changing the
result.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable

from heated_plate.core.grid_state import GridState, has_interior


def max_abs_difference(previous, current) -> float:
    """``max |current - previous|`` over interior cells, 0.0 when there are none."""
    rows, cols = previous.shape
    if not has_interior(rows, cols):
        return 0.0
    return float(abs(current[1:-1, 1:-1] - previous[1:-1, 1:-1]).max())


def partial_max_difference(previous, current, row_start: int, row_stop: int) -> float:
    """Partial maximum over interior rows ``row_start <= i < row_stop``."""
    if row_stop <= row_start or previous.shape[1] < 3:
        return 0.0
    block = current[row_start:row_stop, 1:-1] - previous[row_start:row_stop, 1:-1]
    return float(abs(block).max())


def merge_maxima(partials: Iterable[float]) -> float:
    """Maximum of partial maxima (0.0 for no partitions)."""
    return max(partials, default=0.0)


class MaxAccumulator:
    """
    Shared scalar maximum updated by concurrent workers.

    Each worker computes its partial maximum privately and merges it once
    under the lock, so contention is one acquisition per worker per phase.
    """

    def __init__(self, initial: float = 0.0):
        self._value = initial
        self._lock = threading.Lock()

    def merge(self, value: float) -> None:
        with self._lock:
            if value > self._value:
                self._value = value

    @property
    def value(self) -> float:
        with self._lock:
            return self._value


class ConvergenceReducer:
    """Computes the convergence metric ``diff`` of a grid after a sweep."""

    def reduce(self, grid: GridState) -> float:
        return max_abs_difference(grid.previous, grid.current)
