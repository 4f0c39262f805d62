"""
Unified single-pass terminal shader.

Per-pixel formula with no neighbour reads, evaluated on normalized [0, 1]
floats. The same array code runs on NumPy (CPU reference) or CuPy (CUDA);
``utils/shaders/unified_pass.wgsl`` is the WGSL port used on wgpu.
"""

import numpy as np

from ..config import settings
from .buffers import as_rgba, is_empty


def smoothstep(xp, edge0, edge1, x):
    t = xp.clip((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def unified_pass_array(rgba, contrast, brightness, color_shift, xp=np):
    """
    Evaluate the unified pass on a float RGBA array.

    Args:
        rgba: (H, W, 4) float32 array in [0, 1] (NumPy or CuPy).
        contrast, brightness, color_shift: Effect parameters.
        xp: Array module matching ``rgba``.

    Returns:
        (H, W, 4) float32 array in [0, 1]; alpha unchanged.
    """
    h = rgba.shape[0]
    rgb = rgba[:, :, :3]
    r = rgb[:, :, 0]
    g = rgb[:, :, 1]
    b = rgb[:, :, 2]

    c_max = xp.maximum(xp.maximum(r, g), b)
    c_min = xp.minimum(xp.minimum(r, g), b)
    saturation = (c_max - c_min) / (c_max + 1e-10)

    wr, wg, wb = settings.LUMINANCE_WEIGHTS
    lum = wr * r + wg * g + wb * b

    # Bright, desaturated pixels (highlights, teeth) keep their own color.
    lum_lo, lum_hi = settings.UNIFIED_WHITE_LUM_EDGES
    sat_lo, sat_hi = settings.UNIFIED_WHITE_SAT_EDGES
    white_mask = smoothstep(xp, lum_lo, lum_hi, lum) * (1.0 - smoothstep(xp, sat_lo, sat_hi, saturation))

    target = xp.asarray(settings.UNIFIED_TARGET_GREEN, dtype=rgb.dtype)
    lum3 = lum[:, :, None]
    base = lum3 + (target - lum3) * lum3
    base[:, :, 1] = xp.maximum(base[:, :, 1], g)
    base[:, :, 0] += r * color_shift * settings.UNIFIED_RED_SHIFT_GAIN
    base[:, :, 2] += b * color_shift * settings.UNIFIED_BLUE_SHIFT_GAIN

    mask3 = white_mask[:, :, None]
    color = base + (rgb - base) * mask3

    color = ((color - 0.5) * contrast + 0.5) * brightness

    # Row centres in texture space, as sampled by a full-screen quad.
    v = (xp.arange(h, dtype=rgb.dtype) + 0.5) / max(h, 1)
    scan = 1.0 - xp.abs(xp.sin(v * settings.UNIFIED_SCANLINE_FREQUENCY)) * settings.UNIFIED_SCANLINE_DEPTH
    color = color * scan[:, None, None]

    out = xp.empty_like(rgba)
    out[:, :, :3] = xp.clip(color, 0.0, 1.0)
    out[:, :, 3] = rgba[:, :, 3]
    return out


def render_unified(image, contrast, brightness, color_shift):
    """
    CPU reference of the unified pass on an RGBA uint8 buffer.

    Returns:
        New RGBA uint8 buffer of the same shape.
    """
    image = as_rgba(image, step="unified_pass")
    if is_empty(image):
        return image.copy()

    rgba = image.astype(np.float32) / 255.0
    out = unified_pass_array(rgba, float(contrast), float(brightness), float(color_shift))
    return np.clip(np.rint(out * 255.0), 0, 255).astype(np.uint8)
