"""
Numerical core of the heated plate solver: grid buffers, boundary
initialization, the Jacobi stencil and the convergence reduction.
"""

from .boundary import (
    REFERENCE_BOUNDARY,
    BoundaryInitializer,
    BoundaryRule,
    apply_boundary,
    boundary_cell_count,
    boundary_mean,
    boundary_sum,
    seed_interior,
)
from .convergence import ConvergenceReducer, MaxAccumulator, max_abs_difference, merge_maxima, partial_max_difference
from .grid_state import GridState, has_interior
from .stencil import StencilUpdateEngine, jacobi_sweep, jacobi_sweep_rows, neighbor_average

__all__ = [
    "REFERENCE_BOUNDARY",
    "BoundaryInitializer",
    "BoundaryRule",
    "ConvergenceReducer",
    "GridState",
    "MaxAccumulator",
    "StencilUpdateEngine",
    "apply_boundary",
    "boundary_cell_count",
    "boundary_mean",
    "boundary_sum",
    "has_interior",
    "jacobi_sweep",
    "jacobi_sweep_rows",
    "max_abs_difference",
    "merge_maxima",
    "neighbor_average",
    "partial_max_difference",
    "seed_interior",
]
