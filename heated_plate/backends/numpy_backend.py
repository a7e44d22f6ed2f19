"""
NumPy Backend for heated_plate

Sequential reference implementation: each phase is a single vectorized
slice expression on the host buffers.
"""

from __future__ import annotations

import os
import warnings

from .base_backend import BaseBackend


class NumPyBackend(BaseBackend):
    """NumPy-based sequential backend."""

    def _setup_backend(self):
        # NumPy uses CPU only
        if self.device not in ("cpu", "auto"):
            warnings.warn(f"NumPy backend only supports CPU, ignoring device='{self.device}'")
        self.device = "cpu"

    @property
    def name(self) -> str:
        return "numpy"

    def describe_capabilities(self) -> list[str]:
        return [
            f"Number of processors available = {os.cpu_count() or 1}",
            "Number of threads =              1",
        ]
