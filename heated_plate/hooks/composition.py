"""
Hook Composition

Combine several hooks into one so the driver only ever sees a single hook.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import SolverHooks

if TYPE_CHECKING:
    from heated_plate.solvers.driver import PlateSolution
    from heated_plate.solvers.state import IterationState


class MultiHook(SolverHooks):
    """
    Compose multiple hooks into one, executed in order.

    Example:
        combined = MultiHook(ProgressHook(), HistoryHook())
        solution = driver.solve(hooks=combined)
    """

    def __init__(self, *hooks: SolverHooks):
        self.hooks = [hook for hook in hooks if hook is not None]

    def add_hook(self, hook: SolverHooks) -> None:
        self.hooks.append(hook)

    def on_solve_start(self, initial_state: IterationState) -> None:
        for hook in self.hooks:
            hook.on_solve_start(initial_state)

    def on_iteration_end(self, state: IterationState) -> None:
        for hook in self.hooks:
            hook.on_iteration_end(state)

    def on_solve_end(self, result: PlateSolution) -> PlateSolution:
        """Thread the result through every hook."""
        for hook in self.hooks:
            result = hook.on_solve_end(result)
        return result
