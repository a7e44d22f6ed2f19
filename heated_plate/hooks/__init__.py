"""
Hooks System for heated_plate

Basic Usage:
    from heated_plate.hooks import ProgressHook

    solution = driver.solve(hooks=ProgressHook())

Combining hooks:
    from heated_plate.hooks import HistoryHook, MultiHook, ProgressHook

    solution = driver.solve(hooks=MultiHook(ProgressHook(), HistoryHook()))
"""

from .base import SolverHooks
from .composition import MultiHook
from .progress import HistoryHook, ProgressHook, format_progress_line

__all__ = ["HistoryHook", "MultiHook", "ProgressHook", "SolverHooks", "format_progress_line"]
