import pytest
import numpy as np

from levels_curve.utils.imaging import PixelBuffer
from levels_curve.processing.tone_curve import ControlPoint, CurveState


@pytest.fixture
def sample_rgba_array():
    """Returns a 100x100 RGBA image with four solid quadrants."""
    img = np.zeros((100, 100, 4), dtype=np.uint8)
    img[:50, :50] = [255, 0, 0, 255]    # Red quadrant
    img[:50, 50:] = [0, 255, 0, 200]    # Green quadrant, partly transparent
    img[50:, :50] = [0, 0, 255, 128]    # Blue quadrant, half transparent
    img[50:, 50:] = [255, 255, 0, 255]  # Yellow quadrant
    return img


@pytest.fixture
def sample_buffer(sample_rgba_array):
    return PixelBuffer.from_array(sample_rgba_array)


@pytest.fixture
def random_buffer():
    """Returns a 32x24 buffer of random bytes (fixed seed)."""
    rng = np.random.default_rng(1234)
    data = rng.integers(0, 256, size=32 * 24 * 4, dtype=np.uint8)
    return PixelBuffer.from_bytes(data.tobytes(), 32, 24)


@pytest.fixture
def single_pixel():
    return PixelBuffer.from_bytes(bytes([50, 100, 150, 255]), 1, 1)


@pytest.fixture
def identity_curve():
    return CurveState()


@pytest.fixture
def stretch_curve():
    """Maps 50 -> 0 and 150 -> 255, slope 2.55."""
    return CurveState(ControlPoint(50, 0), ControlPoint(150, 255))


@pytest.fixture
def ramp_buffer():
    """Returns a 256x1 buffer whose R, G and B run through every level."""
    levels = np.arange(256, dtype=np.uint8)
    img = np.stack([levels, levels, levels, np.full(256, 77, dtype=np.uint8)], axis=-1)
    return PixelBuffer.from_array(img.reshape(1, 256, 4))
