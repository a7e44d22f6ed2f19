"""
Solver driver for the steady-state heated plate.

Runs the boundary initialization once, then alternates a Jacobi sweep with
the max-change reduction until the change drops below ``epsilon``:

    Uninitialized -> Seeded -> Iterating -> Converged

``diff`` starts out equal to ``epsilon`` so at least one sweep always runs,
whatever the tolerance and grid size. An optional ``max_iterations`` cap
ends the loop in the Stopped state instead.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from numpy.typing import NDArray

from heated_plate.backends import BaseBackend, create_backend
from heated_plate.config import PlateConfig, build_config
from heated_plate.core.boundary import REFERENCE_BOUNDARY, BoundaryRule
from heated_plate.core.grid_state import GridState
from heated_plate.hooks import SolverHooks
from heated_plate.utils.exceptions import ConvergenceError, SolutionNotAvailableError
from heated_plate.utils.logging import get_logger, log_solver_completion, log_solver_start

from .state import IterationState, SolverState

logger = get_logger(__name__)


@dataclass
class PlateSolution:
    """
    Result of a heated plate solve.

    Attributes:
        grid: Final temperature field, shape (rows, cols)
        iterations: Completed sweep+reduction pairs
        diff: Maximum change of the last sweep
        mean: Boundary mean used to seed the interior
        epsilon: Tolerance the solve ran with
        converged: True when ``diff < epsilon``
        elapsed_time: Wall-clock seconds spent in the iterate loop
        backend: Name of the backend that produced the grid
        output_format: printf-style format for writing the grid
        diff_history: Per-sweep diffs, filled in by HistoryHook
    """

    grid: NDArray
    iterations: int
    diff: float
    mean: float
    epsilon: float
    converged: bool
    elapsed_time: float
    backend: str
    output_format: str = "%6.2f"
    max_iterations: int | None = None
    diff_history: list[float] = field(default_factory=list)

    @property
    def rows(self) -> int:
        return self.grid.shape[0]

    @property
    def cols(self) -> int:
        return self.grid.shape[1]

    def raise_if_not_converged(self) -> PlateSolution:
        """
        Raises:
            ConvergenceError: If the iteration cap stopped the solve
        """
        if not self.converged:
            raise ConvergenceError(
                iterations_used=self.iterations,
                max_iterations=self.max_iterations or self.iterations,
                final_diff=self.diff,
                tolerance=self.epsilon,
                solver_name=f"SolverDriver[{self.backend}]",
                diff_history=self.diff_history or None,
            )
        return self

    def summary(self) -> dict[str, Any]:
        return {
            "rows": self.rows,
            "cols": self.cols,
            "iterations": self.iterations,
            "diff": self.diff,
            "mean": self.mean,
            "epsilon": self.epsilon,
            "converged": self.converged,
            "elapsed_time": self.elapsed_time,
            "backend": self.backend,
        }


class SolverDriver:
    """
    Orchestrates one steady-state solve on an execution backend.

    Args:
        config: Validated configuration (default: PlateConfig())
        backend: Backend instance or name; defaults to ``config.backend``
        boundary: Border temperatures (default: top 0, other edges 100)

    Example:
        >>> driver = SolverDriver(PlateConfig(rows=3, cols=3, epsilon=1.0))
        >>> driver.solve().iterations
        2
    """

    def __init__(
        self,
        config: PlateConfig | None = None,
        backend: BaseBackend | str | None = None,
        boundary: BoundaryRule = REFERENCE_BOUNDARY,
    ):
        self.config = config or PlateConfig()
        if backend is None or isinstance(backend, str):
            backend = create_backend(backend or self.config.backend, **self.config.backend_options())
        self.backend = backend
        self.boundary = boundary

        self._state = SolverState.UNINITIALIZED
        self._grid: GridState | None = None
        self._solution: PlateSolution | None = None

    @property
    def state(self) -> SolverState:
        return self._state

    @property
    def grid(self) -> GridState:
        """The GridState of the last solve."""
        if self._grid is None or not self._state.is_terminal:
            raise SolutionNotAvailableError("grid", solver_name="SolverDriver", solver_state=self._state.value)
        return self._grid

    @property
    def solution(self) -> PlateSolution:
        if self._solution is None:
            raise SolutionNotAvailableError("solution", solver_name="SolverDriver", solver_state=self._state.value)
        return self._solution

    def solve(self, hooks: SolverHooks | None = None) -> PlateSolution:
        """
        Run the solve to completion.

        Args:
            hooks: Optional hooks observing initialization, sweeps and the result

        Returns:
            PlateSolution with the final grid handed off from the GridState
        """
        config = self.config
        backend = self.backend
        epsilon = config.epsilon
        max_iterations = config.max_iterations

        self._state = SolverState.UNINITIALIZED
        self._solution = None
        log_solver_start(logger, f"SolverDriver[{backend.name}]", config.model_dump())

        backend.warmup()
        grid = GridState(config.rows, config.cols, dtype=backend.numpy_dtype)
        self._grid = grid

        diff = epsilon
        iterations = 0

        with backend.resident(grid) as workspace:
            mean = backend.initialize(workspace, self.boundary)
            self._state = SolverState.SEEDED
            state = IterationState(0, diff, mean, epsilon, SolverState.SEEDED, backend.name)
            logger.info(f"Boundary mean = {mean:f}")

            if hooks:
                hooks.on_solve_start(state)

            start_time = time.perf_counter()

            if backend.supports_fused_loop:
                self._state = SolverState.ITERATING
                iterations, diff = backend.iterate_to_convergence(workspace, epsilon, max_iterations)
            else:
                while epsilon <= diff:
                    if max_iterations is not None and iterations >= max_iterations:
                        break

                    self._state = SolverState.ITERATING
                    backend.sweep(workspace)
                    diff = backend.max_difference(workspace)
                    iterations += 1

                    if hooks:
                        hooks.on_iteration_end(
                            state.copy_with_updates(iteration=iterations, diff=diff, phase=SolverState.ITERATING)
                        )

            elapsed_time = time.perf_counter() - start_time

        converged = diff < epsilon
        self._state = SolverState.CONVERGED if converged else SolverState.STOPPED
        if not converged:
            logger.warning(f"Stopped after {iterations} iterations with diff {diff:.3e} >= epsilon {epsilon:.3e}")

        log_solver_completion(logger, f"SolverDriver[{backend.name}]", iterations, diff, elapsed_time, converged)

        solution = PlateSolution(
            grid=grid.current,
            iterations=iterations,
            diff=diff,
            mean=mean,
            epsilon=epsilon,
            converged=converged,
            elapsed_time=elapsed_time,
            backend=backend.name,
            output_format=backend.output_format,
            max_iterations=max_iterations,
        )

        if hooks:
            solution = hooks.on_solve_end(solution)

        self._solution = solution
        return solution


def solve_plate(
    config: PlateConfig | None = None,
    backend: BaseBackend | str | None = None,
    hooks: SolverHooks | None = None,
    boundary: BoundaryRule = REFERENCE_BOUNDARY,
    **kwargs,
) -> PlateSolution:
    """
    Solve the heated plate in one call.

    Args:
        config: Configuration; built from ``kwargs`` when omitted
        backend: Backend instance or name overriding ``config.backend``
        hooks: Optional solver hooks
        boundary: Border temperatures
        **kwargs: PlateConfig fields (rows, cols, epsilon, ...)

    Example:
        >>> solution = solve_plate(rows=20, cols=20, epsilon=0.1, backend="threaded")
        >>> solution.converged
        True
    """
    if config is None:
        config = build_config(**kwargs)
    return SolverDriver(config, backend=backend, boundary=boundary).solve(hooks=hooks)
