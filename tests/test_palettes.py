import numpy as np
import pytest

from phosphor_terminal.processing.palettes import AMBER, GREEN_PHOSPHOR, ColorRamp, Palette
from phosphor_terminal.utils.errors import ConfigurationError, ErrorCategory, InvalidRampError


@pytest.mark.parametrize("ramp", [GREEN_PHOSPHOR, AMBER])
def test_lookup_at_end_stops_is_exact(ramp):
    """The first and last stops return exactly their defined colors."""
    result = ramp.lookup(np.array([0.0, 255.0]))
    assert np.array_equal(result[0], ramp.colors[0])
    assert np.array_equal(result[1], ramp.colors[-1])


@pytest.mark.parametrize("ramp", [GREEN_PHOSPHOR, AMBER])
def test_lookup_clamps_outside_range(ramp):
    """Values outside 0..255 clamp to the end colors instead of extrapolating."""
    result = ramp.lookup(np.array([-40.0, 400.0]))
    assert np.array_equal(result[0], ramp.colors[0])
    assert np.array_equal(result[1], ramp.colors[-1])


@pytest.mark.parametrize("ramp", [GREEN_PHOSPHOR, AMBER])
def test_lookup_hits_every_stop(ramp):
    result = ramp.lookup(np.array(ramp.stops))
    assert np.allclose(result, np.array(ramp.colors))


def test_green_ramp_interpolates_within_bracket():
    """Halfway between stops 100 and 140 is the mean of their colors."""
    result = GREEN_PHOSPHOR.lookup(120.0)
    assert np.allclose(result, [22.5, 100.0, 30.0])


def test_lookup_preserves_shape():
    lum = np.linspace(0, 255, 12).reshape(3, 4)
    assert GREEN_PHOSPHOR.lookup(lum).shape == (3, 4, 3)


def test_palette_selector():
    assert Palette.from_flag(False) is Palette.GREEN
    assert Palette.from_flag(True) is Palette.AMBER
    assert Palette.GREEN.ramp is GREEN_PHOSPHOR
    assert Palette.AMBER.ramp is AMBER


def test_from_points_builds_equivalent_ramp():
    ramp = ColorRamp.from_points("test", [(0, (0, 0, 0)), (255, (255, 128, 0))])
    assert len(ramp) == 2
    assert np.allclose(ramp.lookup(127.5), [127.5, 64.0, 0.0])


@pytest.mark.parametrize("stops, colors", [
    ((), ()),                                                   # empty
    ((10, 255), ((0, 0, 0), (255, 255, 255))),                  # does not start at 0
    ((0, 200), ((0, 0, 0), (255, 255, 255))),                   # does not end at 255
    ((0, 100, 100, 255), ((0, 0, 0),) * 4),                     # repeated stop
    ((0, 150, 100, 255), ((0, 0, 0),) * 4),                     # decreasing stop
    ((0, 255), ((0, 0, 0),)),                                   # missing color
    ((0, 255), ((0, 0, 0), (300, 0, 0))),                       # color out of range
])
def test_invalid_ramps_are_rejected(stops, colors):
    with pytest.raises(InvalidRampError) as excinfo:
        ColorRamp("broken", stops, colors)
    assert excinfo.value.setting_name == "broken"
    assert excinfo.value.category == ErrorCategory.FATAL


def test_invalid_ramp_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        ColorRamp("broken", (0, 0), ((0, 0, 0), (0, 0, 0)))


def test_ramp_tables_are_read_only():
    with pytest.raises(ValueError):
        GREEN_PHOSPHOR._stops[0] = 5.0
