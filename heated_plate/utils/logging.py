"""
Logging Infrastructure for heated_plate

Provides module loggers with configurable levels, colored console output
(via colorlog) and optional file logging.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path

import colorlog

_LOG_FORMAT = "%(asctime)s - %(name)-28s - %(levelname)-8s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class PlateFormatter(logging.Formatter):
    """Formatter with optional colors and source location."""

    def __init__(self, use_colors: bool = False, include_location: bool = False):
        self.use_colors = use_colors
        self.include_location = include_location

        format_str = _LOG_FORMAT
        if self.include_location:
            format_str += " [%(filename)s:%(lineno)d]"

        if self.use_colors:
            self.colored_formatter = colorlog.ColoredFormatter(
                "%(log_color)s" + format_str,
                datefmt=_DATE_FORMAT,
                log_colors={
                    "DEBUG": "cyan",
                    "INFO": "green",
                    "WARNING": "yellow",
                    "ERROR": "red",
                    "CRITICAL": "red,bg_white",
                },
            )

        super().__init__(format_str, datefmt=_DATE_FORMAT)

    def format(self, record):
        if self.use_colors:
            return self.colored_formatter.format(record)
        return super().format(record)


class PlateLogger:
    """Central logging manager holding the global logging configuration."""

    _loggers: dict[str, logging.Logger] = {}
    _log_level = logging.WARNING
    _log_to_file = False
    _log_file_path: Path | None = None
    _use_colors = True
    _include_location = False

    @classmethod
    def configure(
        cls,
        level: str | int = "WARNING",
        log_to_file: bool = False,
        log_file_path: str | Path | None = None,
        use_colors: bool = True,
        include_location: bool = False,
    ):
        """
        Configure global logging settings for heated_plate.

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_to_file: Whether to log to file
            log_file_path: Path to log file (optional)
            use_colors: Use colored terminal output
            include_location: Include file location in log messages
        """
        if isinstance(level, str):
            cls._log_level = getattr(logging, level.upper())
        else:
            cls._log_level = level

        cls._log_to_file = log_to_file
        cls._use_colors = use_colors and sys.stderr.isatty()
        cls._include_location = include_location

        if log_to_file:
            if log_file_path is None:
                log_dir = Path.cwd() / "logs"
                log_dir.mkdir(exist_ok=True)
                timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
                cls._log_file_path = log_dir / f"heated_plate_{timestamp}.log"
            else:
                cls._log_file_path = Path(log_file_path)
                cls._log_file_path.parent.mkdir(parents=True, exist_ok=True)

        for logger in cls._loggers.values():
            cls._setup_logger(logger)

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get or create a configured logger for a module."""
        if name not in cls._loggers:
            logger = logging.getLogger(name)
            cls._loggers[name] = logger
            cls._setup_logger(logger)

        return cls._loggers[name]

    @classmethod
    def _setup_logger(cls, logger: logging.Logger):
        logger.handlers.clear()
        logger.setLevel(cls._log_level)

        # Progress output owns stdout, diagnostics go to stderr
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(PlateFormatter(use_colors=cls._use_colors, include_location=cls._include_location))
        console_handler.setLevel(cls._log_level)
        logger.addHandler(console_handler)

        if cls._log_to_file and cls._log_file_path:
            file_handler = logging.FileHandler(cls._log_file_path)
            file_handler.setFormatter(PlateFormatter(use_colors=False, include_location=cls._include_location))
            file_handler.setLevel(cls._log_level)
            logger.addHandler(file_handler)

        logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured logger instance
    """
    return PlateLogger.get_logger(name)


def configure_logging(**kwargs):
    """
    Configure global logging settings.

    Keyword Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to log to file
        log_file_path: Path to log file
        use_colors: Use colored terminal output
        include_location: Include file location in messages
    """
    PlateLogger.configure(**kwargs)


def log_solver_start(logger: logging.Logger, solver_name: str, config: dict):
    """Log solver initialization with configuration."""
    logger.info(f"Initializing {solver_name}")
    logger.debug(f"Solver configuration: {config}")


def log_solver_completion(
    logger: logging.Logger, solver_name: str, iterations: int, final_diff: float, execution_time: float, converged: bool
):
    """Log solver completion with summary."""
    status = "CONVERGED" if converged else "MAX_ITERATIONS_REACHED"
    logger.info(f"{solver_name} completed - Status: {status}")
    logger.info(f"Final results: {iterations} iterations, diff: {final_diff:.2e}, time: {execution_time:.3f}s")
