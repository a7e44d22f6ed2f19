"""
Cross-backend conformance.

Runs one configuration through several backends and compares the converged
grids cell by cell against the first backend. Backends differ only in the
order of floating-point operations, so grids agree to rounding and the
iteration counts normally match exactly.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from heated_plate.backends import BaseBackend, create_backend
from heated_plate.config import PlateConfig
from heated_plate.solvers.driver import PlateSolution, SolverDriver
from heated_plate.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class BackendComparison:
    """One backend measured against the reference backend."""

    backend: str
    iterations: int
    final_diff: float
    max_abs_diff: float
    max_rel_diff: float
    elapsed_time: float


@dataclass
class ConformanceReport:
    reference: str
    reference_iterations: int
    comparisons: list[BackendComparison] = field(default_factory=list)
    solutions: dict[str, PlateSolution] = field(default_factory=dict)

    def passed(self, rtol: float = 1e-9, allow_iteration_drift: int = 0) -> bool:
        """
        True when every backend matches the reference within ``rtol``.

        Args:
            rtol: Largest allowed relative cellwise difference
            allow_iteration_drift: Allowed difference in iteration counts;
                rounding differences near the tolerance can shift the
                stopping sweep by one
        """
        for comparison in self.comparisons:
            if comparison.max_rel_diff > rtol:
                return False
            if abs(comparison.iterations - self.reference_iterations) > allow_iteration_drift:
                return False
        return True

    def summary(self) -> str:
        lines = [f"Reference: {self.reference} ({self.reference_iterations} iterations)"]
        for c in self.comparisons:
            lines.append(
                f"  {c.backend:<10} iterations={c.iterations:<8d} "
                f"max_abs={c.max_abs_diff:.3e} max_rel={c.max_rel_diff:.3e} time={c.elapsed_time:.3f}s"
            )
        return "\n".join(lines)


def _relative_difference(grid: np.ndarray, reference: np.ndarray) -> tuple[float, float]:
    delta = np.abs(grid.astype(np.float64) - reference.astype(np.float64))
    if delta.size == 0:
        return 0.0, 0.0
    scale = np.maximum(np.abs(reference), 1.0)
    return float(delta.max()), float((delta / scale).max())


def compare_backends(
    config: PlateConfig,
    backends: Sequence[str | BaseBackend],
) -> ConformanceReport:
    """
    Solve ``config`` with each backend and diff against the first one.

    Args:
        config: Shared configuration; its ``backend`` field is ignored
        backends: Backend names or instances, reference first

    Returns:
        ConformanceReport with one comparison per non-reference backend

    Example:
        >>> report = compare_backends(PlateConfig(rows=32, cols=32, epsilon=0.01), ["numpy", "threaded"])
        >>> report.passed()
        True
    """
    if len(backends) < 1:
        raise ValueError("compare_backends needs at least one backend")

    solutions: dict[str, PlateSolution] = {}
    for backend in backends:
        if isinstance(backend, str):
            backend = create_backend(backend, **config.backend_options())
        solution = SolverDriver(config, backend=backend).solve()
        label = backend.name
        if label in solutions:
            label = f"{label}#{len(solutions)}"
        solutions[label] = solution
        logger.info(f"Conformance run on {label}: {solution.iterations} iterations")

    names = list(solutions)
    reference = solutions[names[0]]
    report = ConformanceReport(
        reference=names[0],
        reference_iterations=reference.iterations,
        solutions=solutions,
    )

    for name in names[1:]:
        solution = solutions[name]
        max_abs, max_rel = _relative_difference(solution.grid, reference.grid)
        report.comparisons.append(
            BackendComparison(
                backend=name,
                iterations=solution.iterations,
                final_diff=solution.diff,
                max_abs_diff=max_abs,
                max_rel_diff=max_rel,
                elapsed_time=solution.elapsed_time,
            )
        )

    return report
