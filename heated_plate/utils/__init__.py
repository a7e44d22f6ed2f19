"""
heated_plate utilities.

- logging: colored module loggers and solver log helpers
- exceptions: structured error hierarchy
"""

from .exceptions import (
    BackendUnavailableError,
    ConfigurationError,
    ConvergenceError,
    DimensionMismatchError,
    HeatPlateError,
    OutputWriteError,
    ResourceExhaustedError,
    SolutionNotAvailableError,
)
from .logging import configure_logging, get_logger

__all__ = [
    "BackendUnavailableError",
    "ConfigurationError",
    "ConvergenceError",
    "DimensionMismatchError",
    "HeatPlateError",
    "OutputWriteError",
    "ResourceExhaustedError",
    "SolutionNotAvailableError",
    "configure_logging",
    "get_logger",
]
