import numpy as np
import pytest

from phosphor_terminal.processing.parameters import EffectParameters
from phosphor_terminal.processing.pipeline import apply_unified_pass
from phosphor_terminal.processing.unified import render_unified, smoothstep, unified_pass_array


def scanline_factor(row, height):
    v = (row + 0.5) / height
    return 1.0 - abs(np.sin(v * 400.0)) * 0.08


def params(**kwargs):
    values = dict(contrast=1.0, brightness=1.0, color_shift=0.0)
    values.update(kwargs)
    return EffectParameters(**values)


def test_smoothstep_edges():
    x = np.array([-1.0, 0.7, 0.8, 0.9, 2.0])
    result = smoothstep(np, 0.7, 0.9, x)
    assert np.allclose(result, [0.0, 0.0, 0.5, 1.0, 1.0])


@pytest.mark.parametrize("color_shift", [0.0, 0.5, 1.0])
def test_white_is_protected(color_shift):
    """Pure white is masked out of the recolor: output stays neutral white."""
    img = np.array([[[255, 255, 255, 255]]], dtype=np.uint8)
    result = apply_unified_pass(img, params(color_shift=color_shift))

    expected = np.rint(255 * scanline_factor(0, 1))
    assert np.all(np.abs(result[0, 0, :3].astype(int) - expected) <= 1)
    assert result[0, 0, 3] == 255


def test_white_independent_of_color_shift():
    img = np.full((4, 4, 4), 255, dtype=np.uint8)
    low = apply_unified_pass(img, params(color_shift=0.0))
    high = apply_unified_pass(img, params(color_shift=1.0))
    assert np.max(np.abs(low.astype(int) - high.astype(int))) <= 1


def test_black_stays_black():
    img = np.zeros((3, 3, 4), dtype=np.uint8)
    img[:, :, 3] = 255
    result = apply_unified_pass(img, params(contrast=1.4, brightness=1.1, color_shift=0.3))
    assert np.all(result[:, :, :3] == 0)


def test_green_source_is_preserved():
    """The green channel never drops below the source green."""
    img = np.array([[[0, 255, 0, 255]]], dtype=np.uint8)
    result = apply_unified_pass(img, params())
    g = np.rint(255 * scanline_factor(0, 1))
    assert abs(int(result[0, 0, 1]) - g) <= 1
    assert result[0, 0, 1] > result[0, 0, 0]
    assert result[0, 0, 1] > result[0, 0, 2]


def test_mid_gray_shifts_toward_green():
    img = np.full((1, 1, 4), 128, dtype=np.uint8)
    result = apply_unified_pass(img, params())
    r, g, b = result[0, 0, :3].astype(int)
    assert g > r and g > b


def test_color_shift_reintroduces_red():
    img = np.array([[[200, 30, 30, 255]]], dtype=np.uint8)
    low = apply_unified_pass(img, params(color_shift=0.0))
    high = apply_unified_pass(img, params(color_shift=1.0))
    assert high[0, 0, 0] > low[0, 0, 0]
    assert high[0, 0, 1] == low[0, 0, 1]


def test_alpha_is_preserved(sample_image_rgba):
    result = apply_unified_pass(sample_image_rgba, params(color_shift=0.4))
    assert np.array_equal(result[:, :, 3], sample_image_rgba[:, :, 3])


def test_scanline_term_varies_by_row_only():
    img = np.full((50, 6, 4), 255, dtype=np.uint8)
    result = apply_unified_pass(img, params())
    for row in range(50):
        assert np.all(result[row, :, 0] == result[row, 0, 0])
    assert len(np.unique(result[:, 0, 0])) > 1


def test_output_range(random_image_rgba):
    result = apply_unified_pass(random_image_rgba, params(contrast=2.5, brightness=1.5, color_shift=1.0))
    assert result.dtype == np.uint8
    assert result.shape == random_image_rgba.shape


def test_array_form_matches_uint8_form(random_image_rgba):
    rgba = random_image_rgba.astype(np.float32) / 255.0
    out = unified_pass_array(rgba, 1.3, 0.9, 0.2)
    assert out.dtype == np.float32
    assert out.min() >= 0.0 and out.max() <= 1.0
    expected = np.clip(np.rint(out * 255.0), 0, 255).astype(np.uint8)
    assert np.array_equal(render_unified(random_image_rgba, 1.3, 0.9, 0.2), expected)


def test_rgb_input_gets_opaque_alpha():
    img = np.full((2, 3, 3), 90, dtype=np.uint8)
    result = apply_unified_pass(img, params())
    assert result.shape == (2, 3, 4)
    assert np.all(result[:, :, 3] == 255)
