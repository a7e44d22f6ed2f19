"""
Threaded Backend for heated_plate

Host-parallel backend built on a ``concurrent.futures.ThreadPoolExecutor``.
The interior rows are split into contiguous blocks, one per worker. Every
phase submits all blocks and waits for all of them before returning, which
is the barrier between phases. NumPy releases the GIL inside the slice
arithmetic, so the blocks run on separate cores.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from heated_plate.core.boundary import REFERENCE_BOUNDARY, BoundaryRule, apply_boundary, boundary_mean
from heated_plate.core.convergence import MaxAccumulator, partial_max_difference
from heated_plate.core.stencil import jacobi_sweep_rows
from heated_plate.utils.logging import get_logger

from .base_backend import BaseBackend

logger = get_logger(__name__)


def partition_rows(rows: int, parts: int) -> list[tuple[int, int]]:
    """
    Split interior rows ``1..rows-2`` into at most ``parts`` contiguous blocks.

    Returns half-open ``(start, stop)`` pairs; blocks differ in size by at most one row.
    """
    first, stop = 1, rows - 1
    count = stop - first
    if count <= 0:
        return []

    parts = max(1, min(parts, count))
    base, extra = divmod(count, parts)
    blocks = []
    start = first
    for k in range(parts):
        size = base + (1 if k < extra else 0)
        blocks.append((start, start + size))
        start += size
    return blocks


class ThreadedBackend(BaseBackend):
    """
    Host-parallel backend using a pool of worker threads.

    Options:
        num_threads: Worker count (default: ``os.cpu_count()``)
    """

    def _setup_backend(self):
        if self.device not in ("cpu", "auto"):
            raise ValueError(f"ThreadedBackend runs on the host CPU, got device='{self.device}'")
        self.device = "cpu"

        num_threads = self.config.get("num_threads")
        self.num_threads = int(num_threads) if num_threads else (os.cpu_count() or 1)
        if self.num_threads < 1:
            raise ValueError(f"num_threads must be >= 1, got {self.num_threads}")

        self._executor: ThreadPoolExecutor | None = None
        self._blocks: list[tuple[int, int]] = []

    @property
    def name(self) -> str:
        return "threaded"

    def acquire(self, grid):
        self._executor = ThreadPoolExecutor(max_workers=self.num_threads, thread_name_prefix="heated-plate")
        self._blocks = partition_rows(grid.rows, self.num_threads)
        logger.debug(f"Partitioned {grid.rows - 2} interior rows into {len(self._blocks)} blocks")
        return grid

    def release(self, workspace) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
        self._executor = None
        self._blocks = []

    def _parallel_for(self, task: Callable[[int, int], None]) -> None:
        """Run ``task(start, stop)`` on every block and wait for all of them."""
        if self._executor is None:
            raise RuntimeError("ThreadedBackend phases must run inside backend.resident(grid)")

        futures = [self._executor.submit(task, start, stop) for start, stop in self._blocks]
        # result() re-raises worker exceptions in the caller
        for future in futures:
            future.result()

    def initialize(self, workspace, rule: BoundaryRule = REFERENCE_BOUNDARY) -> float:
        field = workspace.current
        apply_boundary(field, rule)
        mean = boundary_mean(field)

        def seed(start: int, stop: int) -> None:
            field[start:stop, 1:-1] = mean

        self._parallel_for(seed)
        workspace.previous[...] = field
        return mean

    def sweep(self, workspace) -> None:
        workspace.swap()
        previous, current = workspace.previous, workspace.current

        def update(start: int, stop: int) -> None:
            jacobi_sweep_rows(previous, current, start, stop)

        self._parallel_for(update)

    def max_difference(self, workspace) -> float:
        previous, current = workspace.previous, workspace.current
        accumulator = MaxAccumulator()

        def reduce(start: int, stop: int) -> None:
            accumulator.merge(partial_max_difference(previous, current, start, stop))

        self._parallel_for(reduce)
        return accumulator.value

    def get_device_info(self) -> dict:
        info = super().get_device_info()
        info.update({"num_threads": self.num_threads, "cpu_count": os.cpu_count()})
        return info

    def describe_capabilities(self) -> list[str]:
        return [
            f"Number of processors available = {os.cpu_count() or 1}",
            f"Number of threads =              {self.num_threads}",
        ]

    def close(self) -> None:
        self.release(None)
