"""
Effect parameter set shared by both execution strategies.
"""

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Union

from ..config import settings
from ..utils.errors import (
    ConfigurationError,
    ErrorCategory,
    ParameterRangeError,
    log_and_continue,
)
from .palettes import Palette

_DEFAULTS = settings.EFFECT_DEFAULTS

# camelCase names used by the reference UI
_ALIASES = {
    "mappingIntensity": "mapping_intensity",
    "glowIntensity": "glow_intensity",
    "scanlineIntensity": "scanline_intensity",
    "vignetteIntensity": "vignette_intensity",
    "colorShift": "color_shift",
    "lensEnabled": "lens_enabled",
    "useAmber": "palette",
}


def _coerce_palette(value: Union[Palette, str, bool]) -> Palette:
    if isinstance(value, Palette):
        return value
    if isinstance(value, bool):
        return Palette.from_flag(value)
    try:
        return Palette(str(value).lower())
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown palette '{value}'", setting_name="palette", original_error=e
        ) from e


def clamp_parameter(name: str, value: float, strict: bool = False) -> float:
    """
    Clamp one named parameter to its advisory bounds.

    Out-of-range values are clamped and logged; non-finite values fall back
    to the configured default. With ``strict=True`` they raise
    ParameterRangeError instead.
    """
    low, high = settings.PARAMETER_BOUNDS[name]
    value = float(value)
    if low <= value <= high:
        return value

    if strict:
        raise ParameterRangeError(
            f"{name}={value} is outside [{low}, {high}]",
            parameter=name,
            value=value,
        )

    if math.isfinite(value):
        fixed = min(max(value, low), high)
    else:
        fixed = float(_DEFAULTS[name])
    log_and_continue(
        f"{name}={value} outside [{low}, {high}], using {fixed}",
        category=ErrorCategory.USER_INPUT,
    )
    return fixed


@dataclass(frozen=True)
class EffectParameters:
    """Slider-driven settings for one pipeline invocation."""

    mapping_intensity: float = _DEFAULTS["mapping_intensity"]
    contrast: float = _DEFAULTS["contrast"]
    brightness: float = _DEFAULTS["brightness"]
    glow_intensity: float = _DEFAULTS["glow_intensity"]
    scanline_intensity: float = _DEFAULTS["scanline_intensity"]
    curvature: float = _DEFAULTS["curvature"]
    vignette_intensity: float = _DEFAULTS["vignette_intensity"]
    color_shift: float = _DEFAULTS["color_shift"]
    palette: Palette = Palette(_DEFAULTS["palette"])
    lens_enabled: bool = _DEFAULTS["lens_enabled"]

    def __post_init__(self):
        object.__setattr__(self, "palette", _coerce_palette(self.palette))

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "EffectParameters":
        """
        Build parameters from a settings dict.

        Accepts snake_case field names or the camelCase names of the
        reference UI. Missing keys take their defaults.
        """
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in values.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown effect parameter '{key}'", setting_name=key)
            kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values["palette"] = self.palette.value
        return values

    def with_changes(self, **changes) -> "EffectParameters":
        return replace(self, **changes)

    def clamped(self, strict: bool = False) -> "EffectParameters":
        """
        Return a copy with every numeric field inside its advisory bounds.

        Out-of-range values are clamped and logged; non-finite values fall
        back to the field default. With ``strict=True`` the first offending
        field raises ParameterRangeError instead.
        """
        changes = {}
        for name in settings.PARAMETER_BOUNDS:
            value = getattr(self, name)
            fixed = clamp_parameter(name, value, strict=strict)
            if fixed != value:
                changes[name] = fixed

        if not changes:
            return self
        return replace(self, **changes)
