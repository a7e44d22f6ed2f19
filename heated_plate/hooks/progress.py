"""
Progress and history hooks.

ProgressHook reproduces the console table of the classic heated plate
program: the boundary mean, then the iteration number and change at
iterations 1, 2, 4, 8, ... and once more at the final iteration.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from .base import SolverHooks

if TYPE_CHECKING:
    from heated_plate.solvers.driver import PlateSolution
    from heated_plate.solvers.state import IterationState


def format_progress_line(iteration: int, diff: float) -> str:
    return f"  {iteration:8d}  {diff:f}"


class ProgressHook(SolverHooks):
    """
    Print progress on a doubling schedule.

    Args:
        stream: Output stream (default: stdout)
        show_mean: Print the boundary mean and the table header at solve start
    """

    def __init__(self, stream: TextIO | None = None, show_mean: bool = True):
        self.stream = stream
        self.show_mean = show_mean
        self.next_report = 1
        self.reported: list[int] = []

    def _write(self, message: str = "") -> None:
        print(message, file=self.stream or sys.stdout)

    def on_solve_start(self, initial_state: IterationState) -> None:
        self.next_report = 1
        self.reported = []
        if self.show_mean:
            self._write()
            self._write(f"  MEAN = {initial_state.mean:f}")
        self._write()
        self._write("  Iteration Change")
        self._write()

    def on_iteration_end(self, state: IterationState) -> None:
        if state.iteration == self.next_report:
            self._write(format_progress_line(state.iteration, state.diff))
            self.reported.append(state.iteration)
            self.next_report *= 2

    def on_solve_end(self, result: PlateSolution) -> PlateSolution:
        self._write()
        self._write(format_progress_line(result.iterations, result.diff))
        return result


class HistoryHook(SolverHooks):
    """Record the diff of every sweep."""

    def __init__(self):
        self.history: list[float] = []

    def on_solve_start(self, initial_state: IterationState) -> None:
        self.history = []

    def on_iteration_end(self, state: IterationState) -> None:
        self.history.append(state.diff)

    def on_solve_end(self, result: PlateSolution) -> PlateSolution:
        result.diff_history = list(self.history)
        return result
