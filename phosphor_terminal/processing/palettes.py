"""
Color ramps used by the palette mapper.

A ramp is an ordered list of (stop, color) control points covering the
whole 0..255 luminance range. The built-in ramps are module constants and
are never modified after import.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

import numpy as np

from ..utils.errors import InvalidRampError


@dataclass(frozen=True)
class ColorRamp:
    """Piecewise-linear luminance-to-color lookup table."""

    name: str
    stops: Tuple[float, ...]
    colors: Tuple[Tuple[float, float, float], ...]

    def __post_init__(self):
        stops = np.asarray(self.stops, dtype=np.float64)
        colors = np.asarray(self.colors, dtype=np.float64)

        if stops.size == 0:
            raise InvalidRampError(f"Ramp '{self.name}' has no control points", self.name)
        if stops.ndim != 1 or colors.shape != (stops.size, 3):
            raise InvalidRampError(
                f"Ramp '{self.name}' needs one RGB color per stop "
                f"({stops.size} stops, colors shaped {colors.shape})",
                self.name,
            )
        if not (np.all(np.isfinite(colors)) and colors.min() >= 0 and colors.max() <= 255):
            raise InvalidRampError(f"Ramp '{self.name}' has colors outside 0..255", self.name)
        if stops[0] != 0 or stops[-1] != 255:
            raise InvalidRampError(
                f"Ramp '{self.name}' must start at 0 and end at 255 "
                f"(got {stops[0]:g}..{stops[-1]:g})",
                self.name,
            )
        if np.any(np.diff(stops) <= 0):
            raise InvalidRampError(f"Ramp '{self.name}' stops must be strictly increasing", self.name)

        stops.setflags(write=False)
        colors.setflags(write=False)
        # Frozen dataclass: bypass __setattr__ for the cached arrays.
        object.__setattr__(self, "_stops", stops)
        object.__setattr__(self, "_colors", colors)

    @classmethod
    def from_points(cls, name: str, points: Sequence[Tuple[float, Sequence[float]]]) -> "ColorRamp":
        """Build a ramp from ``[(stop, (r, g, b)), ...]`` control points."""
        stops = tuple(float(stop) for stop, _ in points)
        colors = tuple(tuple(float(c) for c in color) for _, color in points)
        return cls(name, stops, colors)

    def lookup(self, luminance) -> np.ndarray:
        """
        Interpolate ramp colors for the given luminance values.

        Values below the first stop or above the last stop clamp to the end
        colors. Returns an array of shape ``luminance.shape + (3,)``.
        """
        lum = np.asarray(luminance, dtype=np.float64)
        return np.stack(
            [np.interp(lum, self._stops, self._colors[:, c]) for c in range(3)],
            axis=-1,
        )

    def __len__(self) -> int:
        return len(self.stops)


GREEN_PHOSPHOR = ColorRamp.from_points("green", [
    (0, (0, 8, 2)),
    (40, (2, 40, 8)),
    (100, (15, 80, 20)),
    (140, (30, 120, 40)),
    (200, (90, 200, 100)),
    (255, (200, 255, 210)),
])

AMBER = ColorRamp.from_points("amber", [
    (0, (8, 4, 0)),
    (60, (80, 38, 0)),
    (120, (170, 92, 8)),
    (190, (235, 160, 40)),
    (255, (255, 232, 170)),
])


class Palette(Enum):
    """Built-in palette selector."""
    GREEN = "green"
    AMBER = "amber"

    @classmethod
    def from_flag(cls, amber: bool) -> "Palette":
        """Map the boolean palette toggle (True selects amber)."""
        return cls.AMBER if amber else cls.GREEN

    @property
    def ramp(self) -> ColorRamp:
        return _RAMPS[self]


_RAMPS = {
    Palette.GREEN: GREEN_PHOSPHOR,
    Palette.AMBER: AMBER,
}
