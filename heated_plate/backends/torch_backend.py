"""
PyTorch Backend for heated_plate

Accelerator-offload backend. Both buffers are allocated once on the selected
device (CUDA > MPS > CPU) and stay there for the whole iterate loop; the
boundary initialization, every sweep and every reduction run as device
kernels. The only per-iteration transfer is the scalar ``diff`` the host
needs to evaluate the loop condition. The final buffers are copied back to
the GridState once, when the resident scope closes.
"""

from __future__ import annotations

import warnings

from heated_plate.utils.exceptions import ResourceExhaustedError
from heated_plate.utils.logging import get_logger

from .base_backend import BaseBackend, DeviceGrid

try:
    import torch
except ImportError as e:
    raise ImportError("PyTorch is required for TorchBackend. Install with: pip install 'heated_plate[torch]'") from e

logger = get_logger(__name__)

CUDA_AVAILABLE = torch.cuda.is_available()
MPS_AVAILABLE = hasattr(torch.backends, "mps") and torch.backends.mps.is_available()


class TorchBackend(BaseBackend):
    """
    PyTorch offload backend with CUDA, MPS, and CPU support.

    Device selection priority for ``device="auto"``: CUDA > MPS > CPU.
    MPS has no float64 support, so float64 requests fall back to float32 there.
    """

    offload = True
    output_format = "%f"

    def _setup_backend(self):
        self.torch_device = self._select_device(self.device)
        self.device_type = self.torch_device.type

        if self.device_type == "mps" and self.precision == "float64":
            warnings.warn(
                "MPS does not support float64, using float32 instead. Set precision='float32' to suppress this warning."
            )
            self.precision = "float32"

        self.torch_dtype = torch.float32 if self.precision == "float32" else torch.float64
        logger.info(f"PyTorch backend on {self.torch_device} ({self.precision})")

    def _select_device(self, device_spec: str) -> torch.device:
        """
        Select the computational device.

        Raises:
            ValueError: If the specified device is unavailable
        """
        if device_spec in ("auto", "gpu"):
            if CUDA_AVAILABLE:
                return torch.device("cuda")
            if MPS_AVAILABLE:
                return torch.device("mps")
            if device_spec == "gpu":
                raise ValueError("GPU requested but neither CUDA nor MPS is available")
            return torch.device("cpu")

        device = torch.device(device_spec)
        if device.type == "cuda" and not CUDA_AVAILABLE:
            raise ValueError("CUDA device requested but CUDA is not available")
        if device.type == "mps" and not MPS_AVAILABLE:
            raise ValueError("MPS device requested but MPS is not available")
        return device

    @property
    def name(self) -> str:
        return "torch"

    def acquire(self, grid):
        try:
            previous = torch.empty(grid.shape, dtype=self.torch_dtype, device=self.torch_device)
            current = torch.empty(grid.shape, dtype=self.torch_dtype, device=self.torch_device)
        except (torch.cuda.OutOfMemoryError, MemoryError) as e:
            raise ResourceExhaustedError("device grid buffers", grid.shape, backend_name=self.name, cause=str(e)) from e
        except RuntimeError as e:
            if "out of memory" not in str(e).lower():
                raise
            raise ResourceExhaustedError("device grid buffers", grid.shape, backend_name=self.name, cause=str(e)) from e

        logger.debug(f"Allocated two {grid.rows}x{grid.cols} buffers on {self.torch_device}")
        return DeviceGrid(previous, current)

    def retrieve(self, workspace: DeviceGrid, grid) -> None:
        grid.current[...] = workspace.current.cpu().numpy().astype(grid.dtype, copy=False)
        grid.previous[...] = workspace.previous.cpu().numpy().astype(grid.dtype, copy=False)

    def release(self, workspace: DeviceGrid) -> None:
        workspace.previous = None
        workspace.current = None
        if self.device_type == "cuda":
            torch.cuda.empty_cache()

    def sweep(self, workspace: DeviceGrid) -> None:
        with torch.no_grad():
            super().sweep(workspace)

    def max_difference(self, workspace: DeviceGrid) -> float:
        with torch.no_grad():
            return super().max_difference(workspace)

    def device_count(self) -> int:
        if self.device_type == "cuda":
            return torch.cuda.device_count()
        if self.device_type == "mps":
            return 1
        return 0

    def get_device_info(self) -> dict:
        info = super().get_device_info()
        info.update({"torch_version": torch.__version__, "torch_device": str(self.torch_device)})
        if self.device_type == "cuda":
            info.update(
                {
                    "cuda_device_count": torch.cuda.device_count(),
                    "gpu_name": torch.cuda.get_device_name(self.torch_device),
                    "memory_gb": torch.cuda.get_device_properties(self.torch_device).total_memory / 1024**3,
                }
            )
        return info

    def describe_capabilities(self) -> list[str]:
        return [
            f"Number of available offload devices = {self.device_count()}",
            f"Offload target = {self.torch_device}",
        ]
