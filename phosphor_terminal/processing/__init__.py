# Processing package initialization
from .palettes import AMBER, GREEN_PHOSPHOR, ColorRamp, Palette
from .parameters import EffectParameters, clamp_parameter
from .adjustments import TerminalAdjustments
from .bloom import apply_bloom
from .lens import barrel_distort
from .unified import render_unified
from .pipeline import apply_lens_distortion, apply_palette_style, apply_unified_pass
from .processing_strategy import EffectContext, SequentialEffect, StyleEffect, UnifiedEffect
