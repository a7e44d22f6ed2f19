"""
Boundary initialization for the heated plate.

The physical region and its fixed border temperatures:

                 top = 0
           +------------------+
           |                  |
left = 100 |                  | right = 100
           |                  |
           +------------------+
                bottom = 100

The interior is seeded with the mean of the border so the relaxation starts
from a reasonable guess. The helpers here only use slicing, in-place
assignment and ``.sum()``, so they work on numpy arrays as well as on
mutable device tensors.
"""

from __future__ import annotations

from dataclasses import dataclass

from heated_plate.core.grid_state import GridState
from heated_plate.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class BoundaryRule:
    """Fixed temperatures of the four plate edges."""

    top: float = 0.0
    bottom: float = 100.0
    left: float = 100.0
    right: float = 100.0


REFERENCE_BOUNDARY = BoundaryRule()


def boundary_cell_count(rows: int, cols: int) -> int:
    """Number of border cells with each corner counted once: ``2*rows + 2*cols - 4``."""
    return 2 * rows + 2 * cols - 4


def apply_boundary(field, rule: BoundaryRule = REFERENCE_BOUNDARY) -> None:
    """
    Write the border values of ``field`` in place.

    Side columns are written for rows ``1..rows-2`` first, then the bottom
    row, then the top row. On a single-row grid that row is therefore the
    top row.
    """
    field[1:-1, 0] = rule.left
    field[1:-1, -1] = rule.right
    field[-1, :] = rule.bottom
    field[0, :] = rule.top


def boundary_sum(field) -> float:
    """Sum of the border: side columns over rows ``1..rows-2``, then the bottom and top rows."""
    total = field[1:-1, 0].sum() + field[1:-1, -1].sum()
    total = total + field[-1, :].sum() + field[0, :].sum()
    return float(total)


def boundary_mean(field) -> float:
    """Mean border temperature, 0.0 when the grid has no border cells to count."""
    rows, cols = field.shape
    count = boundary_cell_count(rows, cols)
    if count <= 0:
        return 0.0
    return boundary_sum(field) / count


def seed_interior(field, value: float) -> None:
    field[1:-1, 1:-1] = value


class BoundaryInitializer:
    """
    Fixes the border of a field and seeds its interior with the border mean.

    Example:
        >>> grid = GridState(3, 3)
        >>> BoundaryInitializer().initialize(grid)
        62.5
    """

    def __init__(self, rule: BoundaryRule = REFERENCE_BOUNDARY):
        self.rule = rule

    def apply(self, field) -> float:
        """Initialize a single mutable field in place and return the seed mean."""
        apply_boundary(field, self.rule)
        mean = boundary_mean(field)
        seed_interior(field, mean)
        return mean

    def initialize(self, grid: GridState) -> float:
        """
        Initialize ``grid.current`` and mirror it into ``grid.previous``.

        Both buffers then carry the same border, which is what lets a sweep
        swap buffers instead of copying the border every iteration.

        Returns:
            The mean border temperature used to seed the interior
        """
        mean = self.apply(grid.current)
        grid.sync_previous()
        logger.debug(f"Seeded {grid.rows}x{grid.cols} interior with boundary mean {mean:.6f}")
        return mean
