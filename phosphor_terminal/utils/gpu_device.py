"""
GPU Device Manager - Unified interface for wgpu and CuPy backends.

A single device is probed on first use and reused for the process lifetime.
Backends, in priority order:
1. CuPy (CUDA/ROCm) - the unified pass runs as fused array operations
2. wgpu (Vulkan/Metal/DX12) - the unified pass runs as a WGSL compute shader
3. None - only the CPU strategies are available
"""

from typing import Optional, Dict, Any
from .logger import get_logger

logger = get_logger(__name__)


class GPUDevice:
    """Singleton GPU device manager."""

    _instance: Optional["GPUDevice"] = None

    def __init__(self) -> None:
        if GPUDevice._instance is not None:
            raise RuntimeError("GPUDevice is a singleton - use GPUDevice.get()")

        self.backend: Optional[str] = None  # "cupy-cuda", "cupy-rocm", "wgpu", or None
        self.device_name: Optional[str] = None

        self._wgpu_adapter: Optional[Any] = None
        self._wgpu_device: Optional[Any] = None
        self._cupy_module: Optional[Any] = None

        self._initialize()

    @classmethod
    def get(cls) -> "GPUDevice":
        """Get the singleton GPU device instance."""
        if cls._instance is None:
            cls._instance = GPUDevice()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton so the next get() probes again (mainly for testing)."""
        if cls._instance is not None:
            cls._instance._cleanup()
            cls._instance = None

    def _initialize(self) -> None:
        if self._try_cupy():
            return
        if self._try_wgpu():
            return

        logger.info("No GPU backend available. Unified pass limited to CPU.")
        self.backend = None
        self.device_name = "CPU"

    def _try_cupy(self) -> bool:
        try:
            import cupy as cp

            if cp.cuda.runtime.getDeviceCount() == 0:
                logger.debug("CuPy available but no GPU devices found")
                return False

            props = cp.cuda.runtime.getDeviceProperties(0)
            device_name = props.get("name", b"Unknown GPU")
            if isinstance(device_name, bytes):
                device_name = device_name.decode("utf-8", errors="ignore")

            cupy_path = cp.__file__.lower() if cp.__file__ else ""
            if "rocm" in cupy_path or "hip" in cupy_path:
                self.backend, label = "cupy-rocm", "ROCm"
            else:
                self.backend, label = "cupy-cuda", "CUDA"

            self._cupy_module = cp
            self.device_name = f"{device_name} ({label})"
            logger.info("GPU backend enabled: %s", self.device_name)
            return True

        except ImportError:
            logger.debug("CuPy not installed")
        except Exception as e:
            logger.debug("CuPy initialization failed: %s", e)

        return False

    def _try_wgpu(self) -> bool:
        try:
            import wgpu

            adapter = wgpu.gpu.request_adapter_sync(power_preference="high-performance")
            if adapter is None:
                logger.debug("wgpu: No compatible GPU adapter found")
                return False

            device = adapter.request_device_sync()
            if device is None:
                logger.debug("wgpu: Failed to create device")
                return False

            # Summary looks like "AMD Radeon ... (Vulkan)"
            summary = str(adapter.summary)
            backend_name = "WebGPU"
            if "(" in summary:
                backend_name = summary.split("(")[-1].replace(")", "").strip()

            self._wgpu_adapter = adapter
            self._wgpu_device = device
            self.backend = "wgpu"
            self.device_name = f"{summary.split('(')[0].strip()} ({backend_name})"
            logger.info("GPU backend enabled: %s", self.device_name)
            return True

        except ImportError:
            logger.debug("wgpu not installed")
        except Exception as e:
            logger.debug("wgpu initialization failed: %s", e)

        return False

    def _cleanup(self) -> None:
        self._wgpu_adapter = None
        self._wgpu_device = None
        self._cupy_module = None

    @property
    def is_available(self) -> bool:
        return self.backend is not None

    @property
    def is_cupy(self) -> bool:
        return self.backend in ("cupy-cuda", "cupy-rocm")

    @property
    def is_wgpu(self) -> bool:
        return self.backend == "wgpu"

    @property
    def wgpu_device(self) -> Optional[Any]:
        return self._wgpu_device

    @property
    def cupy(self) -> Optional[Any]:
        return self._cupy_module

    def get_info(self) -> Dict[str, Any]:
        """Get GPU information for display."""
        return {
            "enabled": self.is_available,
            "backend": self.backend,
            "device_name": self.device_name,
            "is_cupy": self.is_cupy,
            "is_wgpu": self.is_wgpu,
        }
