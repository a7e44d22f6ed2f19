"""
Exception classes for heated_plate with helpful error messages.

Every error carries the component that raised it, an optional suggestion,
a stable error code and diagnostic data, so the CLI can print a readable
report and callers can branch on ``error_code``.
"""

from __future__ import annotations

from typing import Any


class HeatPlateError(Exception):
    """
    Base exception for heated plate solver errors.

    Provides structured error information including:
    - Clear error description
    - Component (solver/backend) context
    - Suggested action for resolution
    - Optional diagnostic data
    """

    def __init__(
        self,
        message: str,
        solver_name: str | None = None,
        suggested_action: str | None = None,
        error_code: str | None = None,
        diagnostic_data: dict[str, Any] | None = None,
    ):
        self.message = message
        self.solver_name = solver_name or "heated_plate"
        self.suggested_action = suggested_action
        self.error_code = error_code
        self.diagnostic_data = diagnostic_data or {}

        full_message = f"[{self.solver_name}] {message}"

        if self.suggested_action:
            full_message += f"\nSuggestion: {self.suggested_action}"

        if self.error_code:
            full_message += f"\nError Code: {self.error_code}"

        if self.diagnostic_data:
            full_message += "\nDiagnostic Information:"
            for key, value in self.diagnostic_data.items():
                full_message += f"\n   - {key}: {value}"

        super().__init__(full_message)


class ConfigurationError(HeatPlateError):
    """Exception raised when solver configuration is invalid."""

    def __init__(
        self,
        parameter_name: str,
        provided_value: Any,
        expected_type: type | None = None,
        valid_range: tuple | None = None,
        solver_name: str | None = None,
        reason: str | None = None,
        suggested_action: str | None = None,
    ):
        self.parameter_name = parameter_name
        self.provided_value = provided_value

        diagnostic_data = {
            "parameter": parameter_name,
            "provided_value": str(provided_value),
            "provided_type": type(provided_value).__name__,
        }

        if expected_type:
            diagnostic_data["expected_type"] = expected_type.__name__

        if valid_range:
            diagnostic_data["valid_range"] = f"({valid_range[0]}, {valid_range[1]}]"

        if reason:
            diagnostic_data["reason"] = reason

        if suggested_action is None:
            suggested_action = _generate_configuration_suggestions(parameter_name, provided_value, valid_range)

        super().__init__(
            message=f"Invalid configuration for parameter '{parameter_name}'",
            solver_name=solver_name,
            suggested_action=suggested_action,
            error_code="INVALID_CONFIGURATION",
            diagnostic_data=diagnostic_data,
        )


class BackendUnavailableError(ConfigurationError):
    """Exception raised when a requested execution backend cannot be used."""

    def __init__(self, backend_name: str, install_hint: str | None = None, reason: str | None = None):
        self.backend_name = backend_name
        self.install_hint = install_hint
        super().__init__(
            parameter_name="backend",
            provided_value=backend_name,
            reason=reason or "backend is not installed or not registered",
            suggested_action=install_hint,
        )


class ResourceExhaustedError(HeatPlateError):
    """Exception raised when grid buffers cannot be allocated on host or device."""

    def __init__(self, resource: str, shape: tuple, backend_name: str | None = None, cause: str | None = None):
        diagnostic_data = {"resource": resource, "shape": str(shape)}
        if cause:
            diagnostic_data["cause"] = cause

        super().__init__(
            message=f"Could not allocate {resource} for a {shape[0]} x {shape[1]} grid",
            solver_name=backend_name,
            suggested_action="Reduce rows/cols, use float32 precision, or select a backend with more memory",
            error_code="RESOURCE_EXHAUSTED",
            diagnostic_data=diagnostic_data,
        )


class ConvergenceError(HeatPlateError):
    """Exception raised when the iteration cap is hit before the tolerance is met."""

    def __init__(
        self,
        iterations_used: int,
        max_iterations: int,
        final_diff: float,
        tolerance: float,
        solver_name: str | None = None,
        diff_history: list[float] | None = None,
    ):
        self.iterations_used = iterations_used
        self.final_diff = final_diff

        diagnostic_data = {
            "iterations_used": iterations_used,
            "max_iterations": max_iterations,
            "final_diff": f"{final_diff:.2e}",
            "required_tolerance": f"{tolerance:.2e}",
            "diff_ratio": f"{final_diff / tolerance:.1f}x too large",
        }

        if diff_history:
            diagnostic_data["convergence_trend"] = _analyze_convergence_trend(diff_history)

        super().__init__(
            message=f"Failed to converge after {iterations_used} iterations",
            solver_name=solver_name,
            suggested_action=_generate_convergence_suggestions(final_diff, tolerance),
            error_code="CONVERGENCE_FAILURE",
            diagnostic_data=diagnostic_data,
        )


class OutputWriteError(HeatPlateError):
    """Exception raised when the final grid cannot be written."""

    def __init__(self, path: str, reason: str):
        self.path = path

        super().__init__(
            message=f"Could not write the solution to '{path}'",
            solver_name="grid_writer",
            suggested_action="Check that the directory exists and is writable",
            error_code="OUTPUT_WRITE_FAILURE",
            diagnostic_data={"path": path, "reason": reason},
        )


class SolutionNotAvailableError(HeatPlateError):
    """Exception raised when trying to access a solution before solving."""

    def __init__(self, operation_attempted: str, solver_name: str | None = None, solver_state: str | None = None):
        super().__init__(
            message=f"Cannot perform '{operation_attempted}' - solver has not been run",
            solver_name=solver_name,
            suggested_action=f"Call solve() first before attempting '{operation_attempted}'",
            error_code="SOLUTION_NOT_AVAILABLE",
            diagnostic_data={
                "attempted_operation": operation_attempted,
                "solver_state": solver_state or "uninitialized",
            },
        )


class DimensionMismatchError(HeatPlateError):
    """Exception raised when an array does not match the grid shape."""

    def __init__(self, array_name: str, provided_shape: tuple, expected_shape: tuple, solver_name: str | None = None):
        super().__init__(
            message=f"Dimension mismatch for {array_name}",
            solver_name=solver_name,
            suggested_action=f"Reshape {array_name} to match the grid: {expected_shape}",
            error_code="DIMENSION_MISMATCH",
            diagnostic_data={
                "array_name": array_name,
                "provided_shape": str(provided_shape),
                "expected_shape": str(expected_shape),
            },
        )


def _analyze_convergence_trend(history: list[float]) -> str:
    """Analyze diff history to determine trend."""
    if len(history) < 3:
        return "insufficient_data"

    recent = history[-3:]

    if recent[-1] < recent[-2] < recent[-3]:
        return "converging_slowly"
    elif recent[-1] > recent[-2] * 1.1:
        return "diverging"
    elif max(recent) / max(min(recent), 1e-300) < 1.1:
        return "stagnating"
    else:
        return "oscillating"


def _generate_convergence_suggestions(final_diff: float, tolerance: float) -> str:
    diff_ratio = final_diff / tolerance

    if diff_ratio < 2:
        return "Increase max_iterations slightly - very close to convergence"
    return "Increase max_iterations or relax epsilon; Jacobi relaxation needs roughly 18/epsilon sweeps"


def _generate_configuration_suggestions(parameter_name: str, provided_value: Any, valid_range: tuple | None) -> str:
    suggestions = []

    if valid_range and isinstance(provided_value, (int, float)):
        if provided_value <= valid_range[0]:
            suggestions.append(f"Increase {parameter_name} above {valid_range[0]}")
        elif provided_value > valid_range[1]:
            suggestions.append(f"Decrease {parameter_name} to at most {valid_range[1]}")

    if parameter_name == "epsilon" and isinstance(provided_value, (int, float)) and provided_value <= 0:
        suggestions.append("Epsilon (error tolerance) must be greater than 0")

    if parameter_name == "backend":
        suggestions.append("Run `heated-plate --list-backends` to see what is available")

    return " | ".join(suggestions) if suggestions else f"Check {parameter_name} value and try again"
