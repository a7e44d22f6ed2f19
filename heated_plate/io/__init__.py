"""Grid file input/output."""

from .grid_writer import HOST_FORMAT, OFFLOAD_FORMAT, read_grid, write_grid

__all__ = ["HOST_FORMAT", "OFFLOAD_FORMAT", "read_grid", "write_grid"]
