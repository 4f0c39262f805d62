# Per-pixel terminal adjustments: palette mapping, tone, scanlines
import numpy as np

from ..config import settings
from .buffers import is_empty, with_color
from .palettes import ColorRamp, Palette


def luminance(rgb: np.ndarray) -> np.ndarray:
    """BT.601 luminance of an (..., 3) float or uint8 array, same scale as input."""
    wr, wg, wb = settings.LUMINANCE_WEIGHTS
    rgb = rgb.astype(np.float64, copy=False)
    return wr * rgb[..., 0] + wg * rgb[..., 1] + wb * rgb[..., 2]


def tone_curve(lum: np.ndarray) -> np.ndarray:
    """Midtone lift ``255 * (L / 255) ** 0.8`` on 0..255 luminance."""
    norm = np.clip(lum, 0, 255) / 255.0
    return 255.0 * np.power(norm, settings.TONE_CURVE_EXPONENT)


class TerminalAdjustments:
    """Stateless per-pixel stages of the sequential pipeline.

    Each method takes an RGBA uint8 buffer and returns a new one; alpha is
    copied unchanged.
    """

    @staticmethod
    def map_palette(image, mapping_intensity, ramp=None):
        """
        Recolor pixels through the tone curve and a color ramp.

        The curved luminance picks a ramp color, and each output channel is
        ``lerp(curved, ramp_color, mapping_intensity)``: intensity 0 yields a
        grayscale image, intensity 1 the pure palette color.

        Args:
            image: RGBA uint8 buffer.
            mapping_intensity: Blend factor in [0, 1].
            ramp: ColorRamp or Palette. Defaults to the green phosphor ramp.
        """
        if is_empty(image): return image.copy()
        if ramp is None:
            ramp = Palette.GREEN.ramp
        elif isinstance(ramp, Palette):
            ramp = ramp.ramp
        if not isinstance(ramp, ColorRamp):
            raise TypeError(f"Expected a ColorRamp or Palette, got {type(ramp).__name__}")

        curved = tone_curve(luminance(image[:, :, :3]))
        mapped = ramp.lookup(curved)
        gray = curved[:, :, np.newaxis]
        blended = gray + (mapped - gray) * float(mapping_intensity)
        return with_color(image, blended)

    @staticmethod
    def adjust_tone(image, contrast, brightness):
        """Contrast around mid-gray (128), then brightness scaling."""
        if is_empty(image): return image.copy()
        rgb = image[:, :, :3].astype(np.float64)
        result = ((rgb - 128.0) * float(contrast) + 128.0) * float(brightness)
        return with_color(image, result)

    @staticmethod
    def apply_scanlines(image, intensity, row_offset=0):
        """
        Darken every ``SCANLINE_PERIOD``-th row by ``(1 - intensity)``.

        ``row_offset`` is the absolute index of the buffer's first row, so a
        horizontal band of a larger image gets the same rows darkened as the
        whole image would.
        """
        if is_empty(image): return image.copy()
        rgb = image[:, :, :3].astype(np.float64)
        rows = np.arange(image.shape[0]) + int(row_offset)
        dark = (rows % settings.SCANLINE_PERIOD) == 0
        rgb[dark] *= max(0.0, 1.0 - float(intensity))
        return with_color(image, rgb)
