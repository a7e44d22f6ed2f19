from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("heated_plate")  # Matches the name in pyproject.toml
except PackageNotFoundError:
    # package is not installed
    __version__ = "0.0.0-dev"

from .backends import create_backend, get_available_backends, get_backend_info, list_backends  # noqa: E402
from .config import PlateConfig, build_config  # noqa: E402
from .conformance import ConformanceReport, compare_backends  # noqa: E402
from .core import REFERENCE_BOUNDARY, BoundaryRule, GridState  # noqa: E402
from .hooks import HistoryHook, MultiHook, ProgressHook, SolverHooks  # noqa: E402
from .io import read_grid, write_grid  # noqa: E402
from .solvers import PlateSolution, SolverDriver, SolverState, solve_plate  # noqa: E402
from .utils.exceptions import (  # noqa: E402
    BackendUnavailableError,
    ConfigurationError,
    ConvergenceError,
    HeatPlateError,
    OutputWriteError,
    ResourceExhaustedError,
)

__all__ = [
    "REFERENCE_BOUNDARY",
    "BackendUnavailableError",
    "BoundaryRule",
    "ConfigurationError",
    "ConformanceReport",
    "ConvergenceError",
    "GridState",
    "HeatPlateError",
    "HistoryHook",
    "MultiHook",
    "OutputWriteError",
    "PlateConfig",
    "PlateSolution",
    "ProgressHook",
    "ResourceExhaustedError",
    "SolverDriver",
    "SolverHooks",
    "SolverState",
    "build_config",
    "compare_backends",
    "create_backend",
    "get_available_backends",
    "get_backend_info",
    "list_backends",
    "read_grid",
    "solve_plate",
    "write_grid",
]
