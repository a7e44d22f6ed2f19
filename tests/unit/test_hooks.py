"""
Unit tests for solver hooks.
"""

import io

import numpy as np

from heated_plate.hooks import HistoryHook, MultiHook, ProgressHook, SolverHooks, format_progress_line
from heated_plate.solvers.driver import PlateSolution
from heated_plate.solvers.state import IterationState, SolverState


def _state(iteration, diff, mean=62.5):
    return IterationState(iteration, diff, mean, 0.001, SolverState.ITERATING, "numpy")


def _solution(iterations, diff):
    return PlateSolution(
        grid=np.zeros((3, 3)),
        iterations=iterations,
        diff=diff,
        mean=62.5,
        epsilon=0.001,
        converged=True,
        elapsed_time=0.0,
        backend="numpy",
    )


class TestProgressHook:
    """Test the doubling progress schedule."""

    def test_progress_line_format(self):
        assert format_progress_line(1, 12.5) == "         1  12.500000"
        assert format_progress_line(16384, 0.001) == "     16384  0.001000"

    def test_header(self):
        stream = io.StringIO()
        ProgressHook(stream=stream).on_solve_start(_state(0, 0.001))
        assert stream.getvalue() == "\n  MEAN = 62.500000\n\n  Iteration Change\n\n"

    def test_header_without_mean(self):
        stream = io.StringIO()
        ProgressHook(stream=stream, show_mean=False).on_solve_start(_state(0, 0.001))
        assert "MEAN" not in stream.getvalue()

    def test_doubling_schedule(self):
        hook = ProgressHook(stream=io.StringIO())
        hook.on_solve_start(_state(0, 0.001))
        for k in range(1, 101):
            hook.on_iteration_end(_state(k, 1.0 / k))
        assert hook.reported == [1, 2, 4, 8, 16, 32, 64]

    def test_final_line(self):
        stream = io.StringIO()
        hook = ProgressHook(stream=stream)
        result = _solution(2, 0.0)
        assert hook.on_solve_end(result) is result
        assert stream.getvalue() == "\n         2  0.000000\n"

    def test_restart_resets_schedule(self):
        hook = ProgressHook(stream=io.StringIO())
        hook.on_solve_start(_state(0, 0.001))
        for k in range(1, 5):
            hook.on_iteration_end(_state(k, 1.0))
        hook.on_solve_start(_state(0, 0.001))
        hook.on_iteration_end(_state(1, 1.0))
        assert hook.reported == [1]


class TestHistoryHook:
    def test_records_every_iteration(self):
        hook = HistoryHook()
        hook.on_solve_start(_state(0, 0.001))
        for k, diff in enumerate([4.0, 2.0, 1.0], start=1):
            hook.on_iteration_end(_state(k, diff))
        result = hook.on_solve_end(_solution(3, 1.0))
        assert result.diff_history == [4.0, 2.0, 1.0]


class TestMultiHook:
    def test_calls_hooks_in_order(self):
        calls = []

        class Recorder(SolverHooks):
            def __init__(self, tag):
                self.tag = tag

            def on_iteration_end(self, state):
                calls.append(self.tag)

        hook = MultiHook(Recorder("a"), None, Recorder("b"))
        hook.on_iteration_end(_state(1, 1.0))
        assert calls == ["a", "b"]

    def test_threads_result_through_hooks(self):
        history = HistoryHook()
        history.history = [1.0]
        hook = MultiHook(ProgressHook(stream=io.StringIO()))
        hook.add_hook(history)
        result = hook.on_solve_end(_solution(1, 1.0))
        assert result.diff_history == [1.0]

    def test_base_hooks_are_noops(self):
        hook = SolverHooks()
        result = _solution(1, 0.0)
        hook.on_solve_start(_state(0, 0.001))
        hook.on_iteration_end(_state(1, 0.0))
        assert hook.on_solve_end(result) is result
