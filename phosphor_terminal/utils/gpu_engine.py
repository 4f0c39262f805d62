"""
GPU Engine - runs the unified terminal pass on a GPU backend.

The unified pass has no neighbour reads, so each backend needs exactly one
upload, one dispatch and one readback:
- wgpu: the WGSL compute shader in ``shaders/unified_pass.wgsl``
- CuPy: the same array formula as the CPU reference, evaluated on device
"""

import struct
from typing import Any, Optional
import numpy as np

from .errors import GPUError, handle_gpu_errors
from .logger import get_logger

logger = get_logger(__name__)

WORKGROUP_SIZE = 8
UNIFORM_SIZE = 16  # Params struct: four f32
SHADER_NAME = "unified_pass"


class GPUEngine:
    """
    Unified-pass engine supporting wgpu and CuPy backends.
    """

    def __init__(self) -> None:
        from .gpu_device import GPUDevice

        self.gpu = GPUDevice.get()
        self._initialized = False

        # wgpu-specific state
        self._pipeline: Optional[Any] = None
        self._uniform_buffer: Optional[Any] = None
        self._texture_pool: Optional[Any] = None

    def is_available(self) -> bool:
        return self.gpu.is_available

    def get_backend_name(self) -> str:
        if self.gpu.is_cupy:
            return "CuPy"
        elif self.gpu.is_wgpu:
            return "wgpu"
        return "CPU"

    # =========================================================================
    # Initialization
    # =========================================================================

    def _init_wgpu_resources(self) -> None:
        """Compile the shader and create the pipeline once."""
        if self._initialized or not self.gpu.is_wgpu:
            return

        import wgpu
        from .gpu_resources import TexturePool
        from .gpu_shaders import ShaderLoader

        device = self.gpu.wgpu_device
        if not device:
            return

        module = ShaderLoader.load(SHADER_NAME)
        self._pipeline = device.create_compute_pipeline(
            layout="auto",
            compute={"module": module, "entry_point": "main"},
        )
        self._uniform_buffer = device.create_buffer(
            size=UNIFORM_SIZE,
            usage=wgpu.BufferUsage.UNIFORM | wgpu.BufferUsage.COPY_DST,
        )
        self._texture_pool = TexturePool(device)

        self._initialized = True
        logger.info("GPU Engine: wgpu unified pipeline initialized")

    def _get_texture(self, width: int, height: int, label: str) -> Any:
        import wgpu

        usage = (
            wgpu.TextureUsage.TEXTURE_BINDING |
            wgpu.TextureUsage.STORAGE_BINDING |
            wgpu.TextureUsage.COPY_DST |
            wgpu.TextureUsage.COPY_SRC
        )
        return self._texture_pool.get(width, height, usage, label)

    # =========================================================================
    # Processing API
    # =========================================================================

    def process_unified(
        self,
        image: np.ndarray,
        contrast: float,
        brightness: float,
        color_shift: float,
    ) -> np.ndarray:
        """
        Run the unified pass on an RGBA uint8 image.

        Raises:
            GPUError: No backend is available or the backend failed.
        """
        if image.shape[0] == 0 or image.shape[1] == 0:
            return image.copy()

        if self.gpu.is_cupy:
            result = self._process_cupy(image, contrast, brightness, color_shift)
        elif self.gpu.is_wgpu:
            result = self._process_wgpu(image, contrast, brightness, color_shift)
        else:
            raise GPUError(
                "No GPU backend available",
                user_message="This effect needs a GPU; use the CPU pipeline instead.",
            )

        return np.clip(np.rint(result * 255.0), 0, 255).astype(np.uint8)

    @handle_gpu_errors()
    def _process_cupy(self, image, contrast, brightness, color_shift) -> np.ndarray:
        """CuPy implementation - fused array operations on device."""
        from ..processing.unified import unified_pass_array

        cp = self.gpu.cupy
        rgba = cp.asarray(image, dtype=cp.float32) / 255.0
        out = unified_pass_array(rgba, float(contrast), float(brightness), float(color_shift), xp=cp)
        return cp.asnumpy(out)

    @handle_gpu_errors()
    def _process_wgpu(self, image, contrast, brightness, color_shift) -> np.ndarray:
        """wgpu implementation - single shader dispatch."""
        self._init_wgpu_resources()
        if not self._pipeline:
            raise RuntimeError("wgpu pipeline not initialized")

        device = self.gpu.wgpu_device
        h, w = image.shape[:2]

        tex_input = self._get_texture(w, h, "input")
        tex_output = self._get_texture(w, h, "output")
        tex_input.upload(image.astype(np.float32) / 255.0)

        uniform_data = struct.pack(
            "ffff", float(contrast), float(brightness), float(color_shift), float(h)
        )
        device.queue.write_buffer(self._uniform_buffer, 0, uniform_data)

        bind_group = device.create_bind_group(
            layout=self._pipeline.get_bind_group_layout(0),
            entries=[
                {"binding": 0, "resource": tex_input.view},
                {"binding": 1, "resource": tex_output.view},
                {"binding": 2, "resource": {"buffer": self._uniform_buffer}},
            ],
        )

        encoder = device.create_command_encoder()
        compute_pass = encoder.begin_compute_pass()
        compute_pass.set_pipeline(self._pipeline)
        compute_pass.set_bind_group(0, bind_group)
        wg_x = (w + WORKGROUP_SIZE - 1) // WORKGROUP_SIZE
        wg_y = (h + WORKGROUP_SIZE - 1) // WORKGROUP_SIZE
        compute_pass.dispatch_workgroups(wg_x, wg_y, 1)
        compute_pass.end()
        device.queue.submit([encoder.finish()])

        return tex_output.readback()

    # =========================================================================
    # Resource Management
    # =========================================================================

    def cleanup(self) -> None:
        """Release pooled textures (keeps pipeline)."""
        if self._texture_pool:
            self._texture_pool.clear()

    def destroy(self) -> None:
        """Release all GPU resources."""
        self.cleanup()
        self._pipeline = None
        self._uniform_buffer = None
        self._texture_pool = None
        self._initialized = False
