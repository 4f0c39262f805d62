"""
Barrel distortion with vignette darkening.

Resampling is destination-to-source: every output pixel pulls its color
from ``floor(c + (p - c) / factor)`` with ``factor = 1 + dist^2 * curvature``,
so each destination pixel is written exactly once. Source coordinates
outside the image produce opaque black.
"""

import numpy as np
import cv2

from .buffers import is_empty, to_uint8

OUTSIDE_COLOR = (0, 0, 0, 255)
# cv2.remap only accepts images smaller than SHRT_MAX on each side
REMAP_LIMIT = 32767


def distortion_maps(width, height, curvature):
    """
    Compute the inverse mapping for a ``width`` x ``height`` image.

    Returns:
        (map_x, map_y, dist): float32 source coordinate maps (already floored,
        so nearest-neighbour remapping is exact) and the float64 normalized
        radial distance of each destination pixel.
    """
    cx = width / 2.0
    cy = height / 2.0
    xs = np.arange(width, dtype=np.float64)
    ys = np.arange(height, dtype=np.float64)

    dx = (xs - cx) / cx
    dy = (ys - cy) / cy
    dist = np.sqrt(dx[np.newaxis, :] ** 2 + dy[:, np.newaxis] ** 2)
    factor = 1.0 + dist * dist * float(curvature)
    # Negative curvature can drive the factor to zero or below; such pixels
    # end up far outside the image and render black.
    factor = np.maximum(factor, 1e-6)

    src_x = np.floor(cx + (xs[np.newaxis, :] - cx) / factor)
    src_y = np.floor(cy + (ys[:, np.newaxis] - cy) / factor)
    return src_x.astype(np.float32), src_y.astype(np.float32), dist


def vignette_factor(dist, vignette_intensity):
    """Multiplicative darkening ``1 - dist * intensity``, floored at 0."""
    return np.maximum(0.0, 1.0 - dist * float(vignette_intensity))


def gather(image, map_x, map_y):
    """Nearest-neighbour lookup of integer source maps; misses are OUTSIDE_COLOR."""
    h, w = image.shape[:2]
    ix = map_x.astype(np.int64)
    iy = map_y.astype(np.int64)
    inside = (ix >= 0) & (ix < w) & (iy >= 0) & (iy < h)

    out = np.empty_like(image)
    out[:] = OUTSIDE_COLOR
    out[inside] = image[iy[inside], ix[inside]]
    return out


def barrel_distort(image, curvature, vignette_intensity):
    """
    Barrel-warp an RGBA uint8 buffer and darken it radially.

    Args:
        image: RGBA uint8 buffer. Not modified.
        curvature: Barrel strength; 0 keeps every pixel in place.
        vignette_intensity: Darkening at normalized distance 1.

    Returns:
        New buffer with the same dimensions. Alpha is copied from the
        sampled source pixel; out-of-bounds pixels are (0, 0, 0, 255).

    Images at or above REMAP_LIMIT on either side are gathered with NumPy
    indexing instead of cv2.remap.
    """
    if is_empty(image):
        return image.copy()

    h, w = image.shape[:2]
    map_x, map_y, dist = distortion_maps(w, h, curvature)

    if max(h, w) < REMAP_LIMIT:
        # Maps hold exact integers, so INTER_NEAREST is a plain gather.
        warped = cv2.remap(
            image,
            map_x,
            map_y,
            interpolation=cv2.INTER_NEAREST,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=OUTSIDE_COLOR,
        )
    else:
        warped = gather(image, map_x, map_y)

    if vignette_intensity == 0:
        return warped

    shade = vignette_factor(dist, vignette_intensity)
    result = warped.copy()
    result[:, :, :3] = to_uint8(warped[:, :, :3].astype(np.float64) * shade[:, :, np.newaxis])
    return result
