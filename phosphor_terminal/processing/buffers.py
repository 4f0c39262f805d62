"""
Pixel buffer helpers.

A pixel buffer is a row-major ``(H, W, 4)`` uint8 NumPy array holding RGBA
samples. Every stage allocates a fresh output buffer of the same shape.
"""

from typing import Optional

import numpy as np

from ..utils.errors import DimensionMismatchError, ProcessingError


def as_rgba(image: np.ndarray, step: Optional[str] = None) -> np.ndarray:
    """
    Validate a decoded image and return it as an RGBA buffer.

    Args:
        image: uint8 array of shape (H, W, 4) or (H, W, 3). RGB input gets
               an opaque alpha plane.
        step: Name of the calling stage, used in error messages.

    Returns:
        (H, W, 4) uint8 array. RGBA input is returned as-is (not copied).
    """
    if not isinstance(image, np.ndarray):
        raise ProcessingError(
            f"Expected a numpy array, got {type(image).__name__}", step=step
        )
    if image.dtype != np.uint8:
        raise ProcessingError(f"Expected uint8 samples, got {image.dtype}", step=step)
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ProcessingError(
            f"Expected an (H, W, 3) or (H, W, 4) array, got shape {image.shape}",
            step=step,
        )

    if image.shape[2] == 4:
        return image

    h, w = image.shape[:2]
    rgba = np.empty((h, w, 4), dtype=np.uint8)
    rgba[:, :, :3] = image
    rgba[:, :, 3] = 255
    return rgba


def is_empty(image: np.ndarray) -> bool:
    """True when the buffer has no pixels."""
    return image.shape[0] == 0 or image.shape[1] == 0


def to_uint8(values: np.ndarray) -> np.ndarray:
    """Quantize float samples to 8 bits (round half to even, then clamp)."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def with_color(source: np.ndarray, rgb: np.ndarray) -> np.ndarray:
    """Build a new RGBA buffer from float RGB samples and the source alpha."""
    out = np.empty(source.shape, dtype=np.uint8)
    out[:, :, :3] = to_uint8(rgb)
    out[:, :, 3] = source[:, :, 3]
    return out


def ensure_same_shape(source: np.ndarray, result: np.ndarray, step: str) -> np.ndarray:
    """Raise DimensionMismatchError unless ``result`` matches ``source``."""
    if result.shape != source.shape:
        raise DimensionMismatchError(step, tuple(source.shape), tuple(result.shape))
    return result
