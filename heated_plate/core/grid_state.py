"""
Grid State for the heated plate solver

Owns the two temperature buffers of a Jacobi relaxation. ``previous`` is
read during a sweep and ``current`` is written; ``swap`` exchanges their
roles so that no buffer is ever read and written in the same sweep.
"""

from __future__ import annotations

from typing import Literal

import numpy as np
from numpy.typing import DTypeLike, NDArray

from heated_plate.utils.exceptions import ConfigurationError, DimensionMismatchError, ResourceExhaustedError

BufferName = Literal["previous", "current"]


def has_interior(rows: int, cols: int) -> bool:
    """True when the grid has at least one cell strictly inside its border."""
    return rows >= 3 and cols >= 3


class GridState:
    """
    Double-buffered temperature field of shape ``rows x cols``.

    GridState is the authority for the final result: backends that keep a
    device mirror copy their buffers back here before the solve returns.

    Example:
        >>> grid = GridState(4, 5)
        >>> grid.set(1, 2, 50.0)
        >>> grid.swap()
        >>> grid.get(1, 2, buffer="previous")
        50.0
    """

    def __init__(self, rows: int, cols: int, dtype: DTypeLike = np.float64):
        if not isinstance(rows, (int, np.integer)) or rows < 1:
            raise ConfigurationError("rows", rows, expected_type=int, valid_range=(0, float("inf")))
        if not isinstance(cols, (int, np.integer)) or cols < 1:
            raise ConfigurationError("cols", cols, expected_type=int, valid_range=(0, float("inf")))

        self.rows = int(rows)
        self.cols = int(cols)
        self.dtype = np.dtype(dtype)

        try:
            self._previous = np.zeros(self.shape, dtype=self.dtype)
            self._current = np.zeros(self.shape, dtype=self.dtype)
        except MemoryError as e:
            raise ResourceExhaustedError("host grid buffers", self.shape, backend_name="GridState", cause=str(e)) from e

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.cols)

    @property
    def has_interior(self) -> bool:
        return has_interior(self.rows, self.cols)

    @property
    def previous(self) -> NDArray:
        """Buffer holding the last completed sweep (read-only during a sweep)."""
        return self._previous

    @property
    def current(self) -> NDArray:
        """Buffer written by the sweep in progress, the latest estimate afterwards."""
        return self._current

    def buffer(self, name: BufferName) -> NDArray:
        if name == "current":
            return self._current
        if name == "previous":
            return self._previous
        raise ValueError(f"Unknown buffer '{name}', expected 'previous' or 'current'")

    def get(self, i: int, j: int, buffer: BufferName = "current") -> float:
        return float(self.buffer(buffer)[i, j])

    def set(self, i: int, j: int, value: float, buffer: BufferName = "current") -> None:
        self.buffer(buffer)[i, j] = value

    def interior(self, buffer: BufferName = "current") -> NDArray:
        """View of the interior cells of a buffer (empty when there are none)."""
        return self.buffer(buffer)[1:-1, 1:-1]

    def swap(self) -> None:
        """Make the just-computed ``current`` the ``previous`` of the next sweep."""
        self._previous, self._current = self._current, self._previous

    def sync_previous(self) -> None:
        """Copy ``current`` into ``previous`` so both buffers agree cell for cell."""
        np.copyto(self._previous, self._current)

    def load(self, values: NDArray, buffer: BufferName | None = None) -> None:
        """
        Copy an external field into the grid.

        Args:
            values: Array of shape ``(rows, cols)``
            buffer: Target buffer, or None to load both buffers
        """
        values = np.asarray(values)
        if values.shape != self.shape:
            raise DimensionMismatchError("values", values.shape, self.shape, solver_name="GridState")

        targets = ("previous", "current") if buffer is None else (buffer,)
        for name in targets:
            np.copyto(self.buffer(name), values, casting="same_kind")

    def snapshot(self, buffer: BufferName = "current") -> NDArray:
        """Independent copy of a buffer, safe to hand to callers."""
        return self.buffer(buffer).copy()

    def __repr__(self) -> str:
        return f"GridState(rows={self.rows}, cols={self.cols}, dtype={self.dtype})"
