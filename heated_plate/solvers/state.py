"""
State representations of the solver driver.

These are the types handed to hooks, giving read access to the progress of
a solve without exposing the grid buffers.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class SolverState(Enum):
    """Lifecycle of a solve: Uninitialized -> Seeded -> Iterating -> Converged."""

    UNINITIALIZED = "uninitialized"
    SEEDED = "seeded"
    ITERATING = "iterating"
    CONVERGED = "converged"
    # Iteration cap reached before diff < epsilon
    STOPPED = "stopped"

    @property
    def is_terminal(self) -> bool:
        return self in (SolverState.CONVERGED, SolverState.STOPPED)


class IterationState(NamedTuple):
    """
    Snapshot of the driver after initialization or after a sweep.

    Attributes:
        iteration: Completed sweep+reduction pairs
        diff: Convergence metric of the last sweep (epsilon before the first)
        mean: Boundary mean used to seed the interior
        epsilon: Convergence tolerance
        phase: Current SolverState
        backend: Name of the executing backend
    """

    iteration: int
    diff: float
    mean: float
    epsilon: float
    phase: SolverState
    backend: str

    def copy_with_updates(self, **kwargs) -> IterationState:
        return self._replace(**kwargs)

    def __str__(self) -> str:
        return f"IterationState(iteration={self.iteration}, diff={self.diff:.2e}, phase={self.phase.value})"
