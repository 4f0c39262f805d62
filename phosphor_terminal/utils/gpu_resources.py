"""
GPU Resource Wrappers - pooled rgba32float textures for the wgpu backend.
"""

from typing import Any, Dict, Tuple
import numpy as np
from .logger import get_logger

logger = get_logger(__name__)

BYTES_PER_TEXEL = 16  # rgba32float
ROW_ALIGNMENT = 256  # copy_texture_to_buffer requirement


class GPUTexture:
    """
    2D rgba32float texture holding normalized [0, 1] RGBA pixels.
    """

    def __init__(self, device: Any, width: int, height: int, usage: int) -> None:
        self.width = width
        self.height = height
        self.format = "rgba32float"
        self._device = device
        self._texture = device.create_texture(
            size=(width, height, 1),
            format=self.format,
            usage=usage,
        )
        self._view = self._texture.create_view()

    @property
    def view(self) -> Any:
        return self._view

    def upload(self, data: np.ndarray) -> None:
        """
        Upload an (H, W, 4) array.

        Args:
            data: float array matching this texture's size.
        """
        if data.shape != (self.height, self.width, 4):
            raise ValueError(
                f"Texture is {self.width}x{self.height}, got array of shape {data.shape}"
            )
        data = np.ascontiguousarray(data, dtype=np.float32)
        self._device.queue.write_texture(
            {"texture": self._texture},
            data,
            {"bytes_per_row": self.width * BYTES_PER_TEXEL, "rows_per_image": self.height},
            (self.width, self.height, 1),
        )

    def readback(self) -> np.ndarray:
        """
        Download texture data from GPU to CPU.

        Returns:
            float32 numpy array of shape (H, W, 4)
        """
        import wgpu

        # Rows in the staging buffer are padded to ROW_ALIGNMENT bytes
        bytes_per_row = (self.width * BYTES_PER_TEXEL + ROW_ALIGNMENT - 1) & ~(ROW_ALIGNMENT - 1)
        staging = self._device.create_buffer(
            size=bytes_per_row * self.height,
            usage=wgpu.BufferUsage.COPY_DST | wgpu.BufferUsage.MAP_READ,
        )

        encoder = self._device.create_command_encoder()
        encoder.copy_texture_to_buffer(
            {"texture": self._texture},
            {"buffer": staging, "bytes_per_row": bytes_per_row},
            (self.width, self.height, 1),
        )
        self._device.queue.submit([encoder.finish()])

        staging.map_sync(mode=wgpu.MapMode.READ)
        raw = staging.read_mapped()
        rows = np.frombuffer(raw, dtype=np.float32).reshape((self.height, bytes_per_row // 4))
        pixels = rows[:, :self.width * 4].reshape((self.height, self.width, 4)).copy()
        staging.unmap()
        staging.destroy()
        return pixels

    def destroy(self) -> None:
        """Release GPU resources."""
        self._view = None
        if self._texture is not None:
            self._texture.destroy()
            self._texture = None


class TexturePool:
    """
    Reusable textures keyed by (width, height, usage, label).

    The label keeps the input and output textures of one dispatch distinct.
    """

    def __init__(self, device: Any) -> None:
        self._device = device
        self._pool: Dict[Tuple[int, int, int, str], GPUTexture] = {}

    def get(self, width: int, height: int, usage: int, label: str = "") -> GPUTexture:
        key = (width, height, usage, label)
        if key not in self._pool:
            self._pool[key] = GPUTexture(self._device, width, height, usage)
            logger.debug("Created pooled texture: %dx%d (%s)", width, height, label)
        return self._pool[key]

    def clear(self) -> None:
        """Release all pooled textures."""
        for tex in self._pool.values():
            tex.destroy()
        self._pool.clear()

    def __len__(self) -> int:
        return len(self._pool)
