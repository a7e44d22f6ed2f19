"""
Plain-text grid files.

Layout: the row count on line 1, the column count on line 2, then one line
per grid row, top row first, each value formatted with ``fmt`` and followed
by a single space.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from heated_plate.utils.exceptions import DimensionMismatchError, OutputWriteError
from heated_plate.utils.logging import get_logger

logger = get_logger(__name__)

HOST_FORMAT = "%6.2f"
OFFLOAD_FORMAT = "%f"


def write_grid(path: str | Path, grid: NDArray, fmt: str = HOST_FORMAT) -> Path:
    """
    Write ``grid`` to ``path``.

    Args:
        path: Destination file, overwritten if it exists
        grid: 2D temperature field
        fmt: printf-style format of one value

    Returns:
        The path written

    Raises:
        OutputWriteError: If the file cannot be opened or written
    """
    path = Path(path)
    grid = np.asarray(grid)
    if grid.ndim != 2:
        raise DimensionMismatchError("grid", grid.shape, ("rows", "cols"))

    rows, cols = grid.shape
    try:
        with open(path, "w") as fp:
            fp.write(f"{rows}\n{cols}\n")
            np.savetxt(fp, grid, fmt=fmt + " ", delimiter="")
    except OSError as e:
        raise OutputWriteError(str(path), reason=e.strerror or str(e)) from e

    logger.debug(f"Wrote {rows}x{cols} grid to {path}")
    return path


def read_grid(path: str | Path) -> NDArray:
    """
    Read a grid written by ``write_grid``.

    Raises:
        DimensionMismatchError: If the header disagrees with the data
    """
    path = Path(path)
    with open(path) as fp:
        rows = int(fp.readline())
        cols = int(fp.readline())
        values = np.loadtxt(fp, dtype=np.float64, ndmin=2)

    if values.shape != (rows, cols):
        raise DimensionMismatchError("grid", values.shape, (rows, cols))
    return values
