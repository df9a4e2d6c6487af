"""
Pytest configuration and shared fixtures for Image Util tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import numpy as np
import pytest
from PIL import Image

from IU_Libs.RasterLib.raster import Raster


@pytest.fixture
def rng():
    """Seeded random generator so randomized filters are repeatable."""
    return np.random.default_rng(1234)


@pytest.fixture
def noise_raster():
    """
    Provide a 40x30 opaque raster filled with seeded random colors.

    Returns:
        Raster with varied pixel values
    """
    generator = np.random.default_rng(42)
    pixels = generator.integers(0, 256, size=(30, 40, 4), dtype=np.uint8)
    pixels[:, :, 3] = 255
    return Raster(pixels)


@pytest.fixture
def write_image(tmp_path):
    """
    Factory writing a solid-color image file into tmp_path.

    Usage:
        path = write_image("photo.png", (20, 10), (255, 0, 0, 255))
    """
    def _write(name, size=(20, 10), color=(255, 0, 0, 255)):
        path = tmp_path / name
        image = Image.new("RGBA", size, color)
        if path.suffix.lower() in (".jpg", ".jpeg"):
            image = image.convert("RGB")
        image.save(path)
        return path

    return _write
