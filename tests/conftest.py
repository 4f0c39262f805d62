import logging

import pytest
import numpy as np

from phosphor_terminal.processing.parameters import EffectParameters


@pytest.fixture
def sample_image_rgba():
    """Returns a 40x30 RGBA image: four color quadrants with varying alpha."""
    img = np.zeros((40, 30, 4), dtype=np.uint8)
    img[:20, :15] = [255, 0, 0, 255]     # Red quadrant
    img[:20, 15:] = [0, 255, 0, 200]     # Green quadrant
    img[20:, :15] = [0, 0, 255, 128]     # Blue quadrant
    img[20:, 15:] = [255, 255, 255, 64]  # White quadrant
    return img


@pytest.fixture
def random_image_rgba():
    """Returns a reproducible random 23x37 RGBA image."""
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, (23, 37, 4), dtype=np.uint8)


@pytest.fixture
def neutral_params():
    """Parameters whose tone, glow, scanline and lens terms are all no-ops."""
    return EffectParameters(
        mapping_intensity=1.0,
        contrast=1.0,
        brightness=1.0,
        glow_intensity=0.0,
        scanline_intensity=0.0,
        curvature=0.0,
        vignette_intensity=0.0,
        color_shift=0.0,
    )


@pytest.fixture
def caplog(caplog):
    """caplog that also sees the package loggers, which do not propagate."""
    loggers = [
        logging.getLogger(name)
        for name in list(logging.root.manager.loggerDict)
        if name.startswith("phosphor_terminal")
    ]
    for logger in loggers:
        logger.addHandler(caplog.handler)
    yield caplog
    for logger in loggers:
        logger.removeHandler(caplog.handler)
