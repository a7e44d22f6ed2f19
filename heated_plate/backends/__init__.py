"""
heated_plate Execution Backends

Backends decide how the solver phases are parallelized and where the grid
buffers live:
- NumPy: sequential host reference
- Threaded: host thread pool over row blocks
- Numba: JIT-compiled parallel host loops
- PyTorch: offload to CUDA/MPS with device-resident buffers
- JAX: offload with the whole iterate loop fused on the device

Auto-selection priority: torch (GPU) > jax (GPU) > numba > threaded
"""

from __future__ import annotations

import importlib.util
from typing import Any

from heated_plate.utils.exceptions import BackendUnavailableError
from heated_plate.utils.logging import get_logger

from .base_backend import BaseBackend, DeviceGrid
from .numpy_backend import NumPyBackend
from .threaded_backend import ThreadedBackend

logger = get_logger(__name__)

# Backend registry
_BACKENDS: dict[str, type[BaseBackend]] = {}
_DEFAULT_BACKEND = "numpy"

_OPTIONAL_BACKENDS = {
    "numba": ("heated_plate.backends.numba_backend", "NumbaBackend", "pip install 'heated_plate[numba]'"),
    "torch": ("heated_plate.backends.torch_backend", "TorchBackend", "pip install 'heated_plate[torch]'"),
    "jax": ("heated_plate.backends.jax_backend", "JAXBackend", "pip install 'heated_plate[jax]'"),
}


def register_backend(name: str, backend_class: type[BaseBackend]):
    """Register an execution backend."""
    _BACKENDS[name] = backend_class


def get_available_backends() -> dict[str, bool]:
    """Get backends with their availability status."""
    backends = {"numpy": True, "threaded": True}

    backends["numba"] = importlib.util.find_spec("numba") is not None

    try:
        import torch

        backends["torch"] = True
        backends["torch_cuda"] = torch.cuda.is_available()
        backends["torch_mps"] = hasattr(torch.backends, "mps") and torch.backends.mps.is_available()
    except ImportError:
        backends["torch"] = False
        backends["torch_cuda"] = False
        backends["torch_mps"] = False

    try:
        import jax

        backends["jax"] = True
        backends["jax_gpu"] = any(d.platform in ("gpu", "cuda", "rocm") for d in jax.devices())
    except ImportError:
        backends["jax"] = False
        backends["jax_gpu"] = False
    except RuntimeError as e:
        logger.warning(f"JAX is installed but device discovery failed: {e}")
        backends["jax_gpu"] = False

    return backends


def _resolve_auto() -> str:
    available = get_available_backends()

    if available["torch_cuda"] or available["torch_mps"]:
        logger.info("Auto-selected PyTorch backend with GPU offload")
        return "torch"
    if available["jax_gpu"]:
        logger.info("Auto-selected JAX backend with GPU offload")
        return "jax"
    if available["numba"]:
        logger.info("Auto-selected Numba backend (no accelerator available)")
        return "numba"

    logger.info("Auto-selected threaded backend (no accelerator or Numba available)")
    return "threaded"


def create_backend(backend_name: str | None = None, **kwargs) -> BaseBackend:
    """
    Create an execution backend instance.

    Args:
        backend_name: "numpy", "threaded", "numba", "torch", "jax", or None/"auto"
        **kwargs: Backend configuration (device, precision, num_threads, ...)

    Returns:
        Backend instance

    Raises:
        BackendUnavailableError: If the backend is unknown or its library is missing

    Example:
        >>> backend = create_backend("threaded", num_threads=4)
        >>> backend.name
        'threaded'
    """
    if backend_name is None or backend_name == "auto":
        backend_name = _resolve_auto()

    if backend_name not in _BACKENDS:
        if backend_name not in _OPTIONAL_BACKENDS:
            raise BackendUnavailableError(backend_name, reason=f"unknown backend, choose from {list_backends()}")

        module_name, class_name, install_hint = _OPTIONAL_BACKENDS[backend_name]
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise BackendUnavailableError(backend_name, install_hint=install_hint, reason=str(e)) from None
        register_backend(backend_name, getattr(module, class_name))

    try:
        return _BACKENDS[backend_name](**kwargs)
    except (ValueError, RuntimeError) as e:
        raise BackendUnavailableError(backend_name, reason=str(e)) from e


def list_backends() -> list[str]:
    """Names accepted by ``create_backend``."""
    return sorted(set(_BACKENDS) | set(_OPTIONAL_BACKENDS))


def get_backend_info() -> dict[str, Any]:
    """Get information about available backends."""
    available = get_available_backends()
    info: dict[str, Any] = {
        "available_backends": available,
        "default_backend": _DEFAULT_BACKEND,
        "registered_backends": list(_BACKENDS.keys()),
    }

    if available["torch"]:
        import torch

        info["torch_info"] = {
            "version": torch.__version__,
            "cuda_available": available["torch_cuda"],
            "mps_available": available["torch_mps"],
            "cuda_device_count": torch.cuda.device_count() if available["torch_cuda"] else 0,
        }

    if available["jax"]:
        import jax

        info["jax_info"] = {
            "version": jax.__version__,
            "devices": [str(d) for d in jax.devices()],
            "has_gpu": available["jax_gpu"],
        }

    return info


# Always-available host backends
register_backend("numpy", NumPyBackend)
register_backend("threaded", ThreadedBackend)

__all__ = [
    "BaseBackend",
    "DeviceGrid",
    "NumPyBackend",
    "ThreadedBackend",
    "create_backend",
    "get_available_backends",
    "get_backend_info",
    "list_backends",
    "register_backend",
]
