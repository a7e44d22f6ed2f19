"""Configuration for heated_plate solves."""

from .plate_config import PlateConfig, build_config

__all__ = ["PlateConfig", "build_config"]
