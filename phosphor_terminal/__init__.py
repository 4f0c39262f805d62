"""Phosphor-terminal image styling: palette ramps, glow, scanlines and lens warp."""

from .processing import (
    AMBER,
    GREEN_PHOSPHOR,
    ColorRamp,
    EffectContext,
    EffectParameters,
    Palette,
    SequentialEffect,
    StyleEffect,
    UnifiedEffect,
    apply_lens_distortion,
    apply_palette_style,
    apply_unified_pass,
)
from .services.render_service import RenderRequest, RenderResult, RenderService

__version__ = "0.1.0"

__all__ = [
    'AMBER',
    'GREEN_PHOSPHOR',
    'ColorRamp',
    'EffectContext',
    'EffectParameters',
    'Palette',
    'SequentialEffect',
    'StyleEffect',
    'UnifiedEffect',
    'apply_lens_distortion',
    'apply_palette_style',
    'apply_unified_pass',
    'RenderRequest',
    'RenderResult',
    'RenderService',
]
