"""
Base Hooks System for the heated plate solver

Hooks let callers observe a solve (progress printing, diff history,
timing) without subclassing the driver.
"""

from __future__ import annotations

from abc import ABC
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from heated_plate.solvers.driver import PlateSolution
    from heated_plate.solvers.state import IterationState


class SolverHooks(ABC):
    """
    Base class for solver hooks.

    Override any method to observe solver behavior. All methods are
    optional - only implement what you need.

    Example:
        class MyHook(SolverHooks):
            def on_iteration_end(self, state):
                print(f"Iteration {state.iteration}: diff={state.diff}")

        driver.solve(hooks=MyHook())
    """

    def on_solve_start(self, initial_state: IterationState) -> None:
        """
        Called once after boundary initialization, before the first sweep.

        Args:
            initial_state: Seeded state carrying the boundary mean
        """

    def on_iteration_end(self, state: IterationState) -> None:
        """
        Called after each sweep+reduction pair.

        Not called per iteration when the backend runs the whole loop on the
        device; ``on_solve_end`` still receives the final counts.

        Args:
            state: State after the sweep, with the new diff
        """

    def on_solve_end(self, result: PlateSolution) -> PlateSolution:
        """
        Called just before the driver returns.

        Args:
            result: Final solution

        Returns:
            Potentially modified result object
        """
        return result
