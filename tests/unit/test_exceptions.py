"""
Unit tests for the heated_plate exception hierarchy.
"""

import pytest

from heated_plate.utils.exceptions import (
    BackendUnavailableError,
    ConfigurationError,
    ConvergenceError,
    DimensionMismatchError,
    HeatPlateError,
    OutputWriteError,
    ResourceExhaustedError,
    SolutionNotAvailableError,
)


class TestHeatPlateError:
    def test_basic_message(self):
        error = HeatPlateError("Something failed")
        assert error.message == "Something failed"
        assert error.solver_name == "heated_plate"
        assert "[heated_plate] Something failed" in str(error)

    def test_full_message(self):
        error = HeatPlateError(
            "Bad thing",
            solver_name="TestSolver",
            suggested_action="Try again",
            error_code="E42",
            diagnostic_data={"key": "value"},
        )
        text = str(error)
        assert "[TestSolver] Bad thing" in text
        assert "Suggestion: Try again" in text
        assert "Error Code: E42" in text
        assert "key: value" in text


class TestConfigurationError:
    def test_attributes(self):
        error = ConfigurationError("epsilon", -1.0, expected_type=float, valid_range=(0, float("inf")))
        assert isinstance(error, HeatPlateError)
        assert error.parameter_name == "epsilon"
        assert error.provided_value == -1.0
        assert error.diagnostic_data["expected_type"] == "float"
        assert "Increase epsilon above 0" in error.suggested_action

    def test_reason_recorded(self):
        error = ConfigurationError("rows", 0, reason="must be >= 1")
        assert error.diagnostic_data["reason"] == "must be >= 1"

    def test_backend_unavailable_is_configuration_error(self):
        error = BackendUnavailableError("torch", install_hint="pip install torch")
        assert isinstance(error, ConfigurationError)
        assert error.backend_name == "torch"
        assert error.parameter_name == "backend"
        assert error.suggested_action == "pip install torch"

    def test_backend_unavailable_default_suggestion(self):
        error = BackendUnavailableError("nope", reason="unknown backend")
        assert "--list-backends" in error.suggested_action


class TestRuntimeErrors:
    def test_resource_exhausted(self):
        error = ResourceExhaustedError("device buffers", (20000, 20000), backend_name="torch", cause="CUDA out of memory")
        assert error.error_code == "RESOURCE_EXHAUSTED"
        assert "20000 x 20000" in error.message
        assert error.diagnostic_data["cause"] == "CUDA out of memory"

    def test_convergence_error(self):
        error = ConvergenceError(10, 10, final_diff=0.5, tolerance=0.001, diff_history=[3.0, 2.0, 1.0, 0.5])
        assert error.iterations_used == 10
        assert error.final_diff == 0.5
        assert error.error_code == "CONVERGENCE_FAILURE"
        assert error.diagnostic_data["convergence_trend"] == "converging_slowly"

    @pytest.mark.parametrize(
        "history, trend",
        [([1.0], "insufficient_data"), ([1.0, 1.0, 2.0], "diverging"), ([1.0, 1.0, 1.0], "stagnating")],
    )
    def test_convergence_trend(self, history, trend):
        error = ConvergenceError(3, 3, final_diff=1.0, tolerance=0.1, diff_history=history)
        assert error.diagnostic_data["convergence_trend"] == trend

    def test_close_to_convergence_suggestion(self):
        error = ConvergenceError(5, 5, final_diff=0.0015, tolerance=0.001)
        assert "very close" in error.suggested_action

    def test_output_write_error(self):
        error = OutputWriteError("/no/such/dir/out.txt", reason="No such file or directory")
        assert error.path == "/no/such/dir/out.txt"
        assert error.error_code == "OUTPUT_WRITE_FAILURE"

    def test_solution_not_available(self):
        error = SolutionNotAvailableError("solution", solver_name="SolverDriver", solver_state="uninitialized")
        assert "solve()" in error.suggested_action

    def test_dimension_mismatch(self):
        error = DimensionMismatchError("values", (3, 2), (2, 3))
        assert error.diagnostic_data["expected_shape"] == "(2, 3)"
