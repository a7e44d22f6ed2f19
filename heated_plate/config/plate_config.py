"""
Runtime configuration for the heated plate solver.

Grid size, tolerance and execution options are validated once, before any
solve work begins, so a bad configuration never produces partial state.
"""

from __future__ import annotations

import warnings
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from heated_plate.utils.exceptions import ConfigurationError


class PlateConfig(BaseModel):
    """
    Validated configuration of one steady-state solve.

    Example:
        >>> config = PlateConfig(rows=100, cols=80, epsilon=0.01)
        >>> config.backend_options()["precision"]
        'float64'
    """

    rows: int = Field(500, ge=1, description="Number of grid rows (M)")
    cols: int = Field(500, ge=1, description="Number of grid columns (N)")
    epsilon: float = Field(0.001, gt=0.0, description="Convergence tolerance on the maximum change")
    max_iterations: int | None = Field(None, ge=1, description="Optional cap on sweeps, None for unbounded")

    backend: str = Field("numpy", description="Execution backend name or 'auto'")
    precision: Literal["float32", "float64"] = Field("float64", description="Floating point precision")
    device: str = Field("auto", description="Device for accelerator backends")
    num_threads: int | None = Field(None, ge=1, description="Host worker threads, None for all cores")

    output_file: Path | None = Field(None, description="Where to write the final grid, None for no output")
    quiet: bool = Field(False, description="Suppress progress and diagnostic printing")
    report_time: bool = Field(False, description="Print elapsed wall-clock time of the solve")

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("epsilon")
    @classmethod
    def validate_epsilon(cls, v: float) -> float:
        """Warn about tolerances that need an impractical number of sweeps."""
        if v < 1e-10:
            warnings.warn(
                f"Very strict tolerance ({v:.2e}) needs on the order of {18 / v:.0e} sweeps",
                UserWarning,
            )
        return v

    @field_validator("backend")
    @classmethod
    def normalize_backend(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.cols)

    def backend_options(self) -> dict[str, Any]:
        """Keyword arguments for ``create_backend``."""
        options: dict[str, Any] = {"device": self.device, "precision": self.precision}
        if self.num_threads is not None:
            options["num_threads"] = self.num_threads
        return options


def build_config(**kwargs) -> PlateConfig:
    """
    Create a PlateConfig, reporting the first invalid field as ConfigurationError.

    Raises:
        ConfigurationError: If any field fails validation
    """
    try:
        return PlateConfig(**kwargs)
    except ValidationError as e:
        error = e.errors()[0]
        parameter = str(error["loc"][0]) if error["loc"] else "config"
        provided = error.get("input", kwargs.get(parameter))
        valid_range = (0, float("inf")) if parameter in ("epsilon", "rows", "cols", "max_iterations") else None
        raise ConfigurationError(
            parameter_name=parameter,
            provided_value=provided,
            valid_range=valid_range,
            solver_name="PlateConfig",
            reason=error["msg"],
        ) from e
