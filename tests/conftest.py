"""Pytest fixtures for Paint Numbers tests."""

import os
import tempfile

import cv2
import numpy as np
import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def default_config():
    """Create default pipeline configuration."""
    from paintnumbers.config import PipelineConfig
    return PipelineConfig()


@pytest.fixture
def solid_red_image():
    """A 2x2 image of four identical red pixels."""
    from paintnumbers.models import RawImage
    arr = np.zeros((2, 2, 3), dtype=np.uint8)
    arr[:, :] = (255, 0, 0)
    return RawImage.from_array(arr)


@pytest.fixture
def checkerboard_array():
    """A 4x4 black/white checkerboard with black at (0, 0)."""
    yy, xx = np.indices((4, 4))
    even = ((xx + yy) % 2 == 0)[..., None]
    return np.where(even, 0, 255).astype(np.uint8).repeat(3, axis=2)


@pytest.fixture
def checkerboard_image(checkerboard_array):
    """The checkerboard as a RawImage."""
    from paintnumbers.models import RawImage
    return RawImage.from_array(checkerboard_array)


@pytest.fixture
def blocky_array():
    """
    A 48x64 photo-like image: 8x8 blocks of random color with mild noise.

    Seeded, so every test run sees the same pixels.
    """
    rng = np.random.default_rng(7)
    base = rng.integers(0, 256, size=(6, 8, 3))
    img = np.repeat(np.repeat(base, 8, axis=0), 8, axis=1)
    noise = rng.integers(-6, 7, size=img.shape)
    return np.clip(img + noise, 0, 255).astype(np.uint8)


@pytest.fixture
def blocky_image(blocky_array):
    """The blocky image as a RawImage."""
    from paintnumbers.models import RawImage
    return RawImage.from_array(blocky_array)


@pytest.fixture
def small_config(default_config):
    """Configuration scaled down for tiny synthetic images."""
    default_config.quantize.num_colors = 8
    default_config.regions.min_region_size = 10
    default_config.labels.min_region_for_number = 20
    return default_config


@pytest.fixture
def synthetic_input_file(temp_dir, blocky_array):
    """Write the blocky image to disk as a PNG."""
    path = os.path.join(temp_dir, "photo.png")
    cv2.imwrite(path, cv2.cvtColor(blocky_array, cv2.COLOR_RGB2BGR))
    return path
