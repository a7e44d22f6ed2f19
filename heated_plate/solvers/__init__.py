"""Solver driver and its state types."""

from .driver import PlateSolution, SolverDriver, solve_plate
from .state import IterationState, SolverState

__all__ = ["IterationState", "PlateSolution", "SolverDriver", "SolverState", "solve_plate"]
