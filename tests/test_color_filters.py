"""
Tests for the Pillow-backed color filters.

Tests cover:
- Blur kinds
- Brightness, contrast and colorize lookup tables
- Greyscale and sepia
- Smooth kernel
- Missing Pillow primitives
"""

import unittest

import numpy as np
import pytest
from PIL import ImageFilter

from IU_Libs.errors import FilterUnavailableError, InvalidParameterError
from IU_Libs.FiltersLib.color_filters import (
    blur,
    brightness,
    colorize,
    contrast,
    greyscale,
    sepia,
    smooth,
)
from IU_Libs.RasterLib.raster import Raster


class TestBlur(unittest.TestCase):
    """Test blur kinds."""

    def setUp(self):
        self.uniform = Raster.new(10, 8, (60, 90, 120, 200))

    def test_gaussian_uniform_unchanged(self):
        result = blur(self.uniform, "gaussian")

        np.testing.assert_array_equal(result.pixels, self.uniform.pixels)

    def test_selective_uniform_unchanged(self):
        result = blur(self.uniform, "selective")

        np.testing.assert_array_equal(result.pixels, self.uniform.pixels)

    def test_kind_is_case_insensitive(self):
        self.assertEqual(blur(self.uniform, "GAUSSIAN").size, (10, 8))

    def test_blur_softens_edge(self):
        raster = Raster.new(10, 10, (0, 0, 0, 255))
        raster.fill_rect(5, 0, 9, 9, (255, 255, 255, 255))

        result = blur(raster)

        value = result.get_pixel(5, 5)[0]
        self.assertGreater(value, 0)
        self.assertLess(value, 255)

    def test_unknown_kind(self):
        with self.assertRaises(InvalidParameterError):
            blur(self.uniform, "motion")

    def test_returns_new_raster(self):
        self.assertIsNot(blur(self.uniform), self.uniform)


class TestToneFilters(unittest.TestCase):
    """Test brightness, contrast, colorize."""

    def test_brightness_shifts_rgb_only(self):
        result = brightness(Raster.new(3, 3, (100, 100, 100, 128)), -20)

        self.assertEqual(result.get_pixel(1, 1), (80, 80, 80, 128))

    def test_brightness_clamped(self):
        result = brightness(Raster.new(2, 2, (10, 100, 200, 255)), 1000)

        self.assertEqual(result.get_pixel(0, 0), (255, 255, 255, 255))

    def test_contrast_zero_is_identity(self):
        raster = Raster.new(4, 4, (13, 128, 250, 255))

        result = contrast(raster, 0)

        np.testing.assert_array_equal(result.pixels, raster.pixels)

    def test_negative_contrast_stretches(self):
        result = contrast(Raster.new(2, 2, (50, 200, 50, 255)), -100)

        self.assertEqual(result.get_pixel(0, 0), (0, 255, 0, 255))

    def test_colorize_adds_per_channel(self):
        result = colorize(Raster.new(2, 2, (10, 250, 100, 255)), (90, 55, -30))

        self.assertEqual(result.get_pixel(0, 0), (100, 255, 70, 255))


class TestGreyscaleAndSepia(unittest.TestCase):
    """Test greyscale and sepia."""

    def test_greyscale_equal_channels(self):
        result = greyscale(Raster.new(3, 3, (255, 0, 0, 99)))
        r, g, b, a = result.get_pixel(0, 0)

        self.assertEqual(r, g)
        self.assertEqual(g, b)
        self.assertTrue(75 <= r <= 77)
        self.assertEqual(a, 99)

    def test_sepia_default(self):
        result = sepia(Raster.new(2, 2, (128, 128, 128, 255)))

        self.assertEqual(result.get_pixel(0, 0), (188, 153, 128, 255))

    def test_sepia_custom_tint(self):
        result = sepia(Raster.new(2, 2, (100, 100, 100, 255)), "0, 0, 10", 0)

        self.assertEqual(result.get_pixel(0, 0), (100, 100, 110, 255))


class TestSmooth(unittest.TestCase):
    """Test smooth."""

    def test_uniform_nearly_unchanged(self):
        raster = Raster.new(6, 6, (100, 50, 25, 255))

        diff = smooth(raster, 6).pixels.astype(int) - raster.pixels.astype(int)
        self.assertLessEqual(np.abs(diff).max(), 1)

    def test_value_clamped(self):
        raster = Raster.new(6, 6, (100, 50, 25, 255))

        self.assertEqual(smooth(raster, 100).size, (6, 6))

    def test_zero_kernel_sum_rejected(self):
        with self.assertRaises(InvalidParameterError):
            smooth(Raster.new(3, 3), -8)


class TestFilterUnavailable:
    """Missing Pillow primitives must fail loudly."""

    def test_missing_median_filter(self, monkeypatch):
        monkeypatch.delattr(ImageFilter, "MedianFilter")

        with pytest.raises(FilterUnavailableError):
            blur(Raster.new(3, 3, (1, 2, 3, 255)), "selective")

    def test_missing_kernel(self, monkeypatch):
        monkeypatch.delattr(ImageFilter, "Kernel")

        with pytest.raises(FilterUnavailableError):
            smooth(Raster.new(3, 3, (1, 2, 3, 255)))


if __name__ == "__main__":
    unittest.main()
