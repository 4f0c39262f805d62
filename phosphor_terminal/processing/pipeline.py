"""
Sequential terminal-style pipeline and the public entry points.

    image -> palette map -> tone -> bloom -> scanlines -> [lens distortion]

Each stage reads one complete buffer and returns a new one. With more than
one worker the per-pixel and bloom stages are split into horizontal row
bands; bloom bands read a halo of ``BLOOM_RADIUS`` rows from the full
source so the result is identical to a single-band run.
"""

import concurrent.futures
import time
from typing import Callable, Optional

import numpy as np

from ..config import settings
from ..utils.errors import ErrorCategory, handle_errors
from ..utils.logger import get_logger
from .adjustments import TerminalAdjustments
from .bloom import apply_bloom
from .buffers import as_rgba, ensure_same_shape, is_empty
from .lens import barrel_distort
from .parameters import EffectParameters, clamp_parameter
from .unified import render_unified

logger = get_logger(__name__)

# stage(band, row_offset) -> new band
BandStage = Callable[[np.ndarray, int], np.ndarray]


def _band_ranges(height, workers):
    """Split ``height`` rows into at most ``workers`` contiguous ranges."""
    count = max(1, min(int(workers), height))
    edges = np.linspace(0, height, count + 1).astype(int)
    return [(int(a), int(b)) for a, b in zip(edges[:-1], edges[1:]) if b > a]


def run_banded(stage: BandStage, image: np.ndarray, workers: int, halo: int = 0) -> np.ndarray:
    """
    Run ``stage`` over horizontal bands of ``image`` on a thread pool.

    Each band is read from ``image`` with ``halo`` extra rows above and
    below, and the halo rows are cropped from the band's output. Bands are
    written into a separate destination buffer; ``image`` is never written.
    """
    h = image.shape[0]
    if workers <= 1 or h < 2:
        return stage(image, 0)

    ranges = _band_ranges(h, workers)
    out = np.empty_like(image)

    def run_band(r0, r1):
        lo = max(0, r0 - halo)
        hi = min(h, r1 + halo)
        result = stage(image[lo:hi], lo)
        out[r0:r1] = result[r0 - lo:r1 - lo]

    with concurrent.futures.ThreadPoolExecutor(max_workers=len(ranges)) as executor:
        futures = [executor.submit(run_band, r0, r1) for r0, r1 in ranges]
        for future in concurrent.futures.as_completed(futures):
            future.result()  # Propagate worker exceptions
    return out


@handle_errors(category=ErrorCategory.PROCESSING, reraise=True)
def apply_palette_style(image, params: Optional[EffectParameters] = None, workers: Optional[int] = None):
    """
    Run palette mapping, tone adjustment, bloom and scanlines in order.

    Args:
        image: Decoded RGBA (or RGB) uint8 buffer; not modified.
        params: EffectParameters; out-of-range values are clamped.
        workers: Row-band threads (defaults to settings.PROCESSING_WORKERS).

    Returns:
        New (H, W, 4) uint8 buffer.
    """
    source = as_rgba(image, step="palette_style")
    params = (params or EffectParameters()).clamped()
    workers = settings.PROCESSING_WORKERS if workers is None else workers
    if is_empty(source):
        return source.copy()

    ramp = params.palette.ramp

    def color_stage(band, row_offset):
        mapped = TerminalAdjustments.map_palette(band, params.mapping_intensity, ramp)
        return TerminalAdjustments.adjust_tone(mapped, params.contrast, params.brightness)

    def bloom_stage(band, row_offset):
        return apply_bloom(band, params.glow_intensity)

    def scanline_stage(band, row_offset):
        return TerminalAdjustments.apply_scanlines(band, params.scanline_intensity, row_offset)

    stages = (
        ("palette_tone", color_stage, 0),
        ("bloom", bloom_stage, settings.BLOOM_RADIUS),
        ("scanlines", scanline_stage, 0),
    )

    current = source
    for name, stage, halo in stages:
        start = time.perf_counter()
        result = ensure_same_shape(current, run_banded(stage, current, workers, halo), name)
        logger.debug("Stage %s: %.1f ms", name, (time.perf_counter() - start) * 1000.0)
        current = result
    return current


@handle_errors(category=ErrorCategory.PROCESSING, reraise=True)
def apply_lens_distortion(image, curvature, vignette_intensity):
    """
    Barrel distortion plus vignette on an RGBA (or RGB) uint8 buffer.

    Out-of-range parameters are clamped. Returns a new buffer with the
    input's dimensions.
    """
    source = as_rgba(image, step="lens_distortion")
    curvature = clamp_parameter("curvature", curvature)
    vignette_intensity = clamp_parameter("vignette_intensity", vignette_intensity)
    return ensure_same_shape(
        source, barrel_distort(source, curvature, vignette_intensity), "lens_distortion"
    )


@handle_errors(category=ErrorCategory.PROCESSING, reraise=True)
def apply_unified_pass(image, params: Optional[EffectParameters] = None):
    """
    CPU evaluation of the single-pass shader formula.

    Uses ``contrast``, ``brightness`` and ``color_shift`` from ``params``;
    the palette, glow, scanline and lens fields do not apply.
    """
    source = as_rgba(image, step="unified_pass")
    params = (params or EffectParameters()).clamped()
    return ensure_same_shape(
        source,
        render_unified(source, params.contrast, params.brightness, params.color_shift),
        "unified_pass",
    )
