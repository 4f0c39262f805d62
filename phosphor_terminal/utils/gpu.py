"""
Module-level access to the GPU device and engine.

Detection is deferred until first use so importing the package never
touches a driver.
"""

import threading

from .logger import get_logger

logger = get_logger(__name__)

_engine = None
_engine_lock = threading.Lock()


def get_gpu_info():
    """Returns a dict describing the detected backend."""
    from .gpu_device import GPUDevice

    info = GPUDevice.get().get_info()
    if info["enabled"]:
        info["message"] = f"GPU acceleration: {info['device_name']}"
    else:
        info["message"] = "No GPU backend detected; using CPU strategies."
    return info


def is_gpu_enabled():
    """True if a CuPy or wgpu backend was detected."""
    from .gpu_device import GPUDevice

    return GPUDevice.get().is_available


def get_gpu_backend():
    """Returns 'cuda', 'rocm', 'wgpu' or None."""
    from .gpu_device import GPUDevice

    backend = GPUDevice.get().backend
    if backend == "cupy-cuda":
        return "cuda"
    if backend == "cupy-rocm":
        return "rocm"
    return backend


def get_gpu_engine():
    """
    Returns the shared GPUEngine, or None when no backend is available.
    """
    global _engine

    if not is_gpu_enabled():
        return None

    with _engine_lock:
        if _engine is None:
            from .gpu_engine import GPUEngine
            _engine = GPUEngine()
            logger.info("GPU engine ready (%s)", _engine.get_backend_name())
    return _engine


def has_gpu_engine():
    return get_gpu_engine() is not None


def release_gpu_engine():
    """
    Destroy the shared engine, drop compiled shaders and forget the device.

    The next get_gpu_engine() probes the hardware again.
    """
    global _engine
    from .gpu_device import GPUDevice
    from .gpu_shaders import ShaderLoader

    with _engine_lock:
        if _engine is not None:
            _engine.destroy()
            _engine = None
        ShaderLoader.clear_cache()
        GPUDevice.reset()
    logger.debug("GPU engine released")
