"""
Bloom / glow convolution.

Each pixel is averaged with its neighbours inside a fixed radius using a
linear falloff weight ``max(0, 1 - distance / radius)``:

    result = (self + glow * sum(neighbour * weight)) / (1 + glow * sum(weight))

Only in-bounds neighbours contribute, so border pixels are normalized by a
smaller weight sum (no wraparound, no mirroring). The convolution always
reads the complete input buffer and writes a separate output buffer.
"""

import numpy as np
import cv2

from ..config import settings
from .buffers import is_empty, with_color


def bloom_kernel(radius: int = settings.BLOOM_RADIUS) -> np.ndarray:
    """(2r+1) x (2r+1) neighbour weights. The centre weight is 0 (self is added separately)."""
    offsets = np.arange(-radius, radius + 1, dtype=np.float64)
    dist = np.hypot(offsets[np.newaxis, :], offsets[:, np.newaxis])
    kernel = np.maximum(0.0, 1.0 - dist / float(radius))
    kernel[radius, radius] = 0.0
    return kernel


def apply_bloom(image, glow_intensity, radius=settings.BLOOM_RADIUS):
    """
    Apply the glow convolution to an RGBA uint8 buffer.

    Args:
        image: RGBA uint8 buffer. Not modified.
        glow_intensity: Neighbour contribution factor; 0 is the identity.
        radius: Neighbourhood radius in pixels.

    Returns:
        New RGBA uint8 buffer; alpha copied from the input.
    """
    glow = max(0.0, float(glow_intensity))
    if is_empty(image) or glow == 0.0:
        return image.copy()

    kernel = bloom_kernel(radius)
    # float64 keeps flat regions exact after normalization
    src = image[:, :, :3].astype(np.float64)

    # Zero-padded borders: out-of-bounds neighbours add nothing to either sum.
    neighbour_sum = cv2.filter2D(src, -1, kernel, borderType=cv2.BORDER_CONSTANT)
    coverage = np.ones(image.shape[:2], dtype=np.float64)
    weight_sum = cv2.filter2D(coverage, -1, kernel, borderType=cv2.BORDER_CONSTANT)

    accumulated = src + neighbour_sum * glow
    result = accumulated / (1.0 + weight_sum * glow)[:, :, np.newaxis]
    return with_color(image, np.minimum(result, 255.0))
