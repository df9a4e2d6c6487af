"""
Unit tests for the Raster buffer and color helpers.
"""

import numpy as np
import pytest
from PIL import Image

from IU_Libs.errors import InvalidParameterError
from IU_Libs.RasterLib.color_utils import (
    parse_hex_color,
    parse_rgb_triplet,
    rgb_to_hsv,
    round_half_away,
)
from IU_Libs.RasterLib.raster import Raster, alpha_over


class TestRasterConstruction:
    """Tests for creating rasters."""

    def test_new_fills_color(self):
        raster = Raster.new(4, 3, (10, 20, 30, 40))

        assert raster.size == (4, 3)
        assert raster.pixels.shape == (3, 4, 4)
        assert raster.get_pixel(2, 1) == (10, 20, 30, 40)

    def test_new_defaults_to_transparent_black(self):
        assert Raster.new(2, 2).get_pixel(0, 0) == (0, 0, 0, 0)

    def test_new_rgb_fill_is_opaque(self):
        assert Raster.new(1, 1, (1, 2, 3)).get_pixel(0, 0) == (1, 2, 3, 255)

    def test_new_rejects_empty_size(self):
        with pytest.raises(InvalidParameterError):
            Raster.new(0, 5)

    def test_constructor_copies_array(self):
        pixels = np.zeros((2, 2, 4), dtype=np.uint8)
        raster = Raster(pixels)
        pixels[0, 0] = 255

        assert raster.get_pixel(0, 0) == (0, 0, 0, 0)

    def test_constructor_rejects_wrong_shape(self):
        with pytest.raises(InvalidParameterError):
            Raster(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_copy_is_independent(self):
        raster = Raster.new(2, 2, (1, 1, 1, 255))
        clone = raster.copy()
        clone.set_pixel(0, 0, (9, 9, 9, 255))

        assert raster.get_pixel(0, 0) == (1, 1, 1, 255)

    def test_pillow_bridge(self):
        image = Image.new("RGB", (5, 4), (7, 8, 9))
        raster = Raster.from_image(image)

        assert raster.size == (5, 4)
        assert raster.get_pixel(4, 3) == (7, 8, 9, 255)

        back = raster.to_image()
        assert back.mode == "RGBA"
        assert back.getpixel((0, 0)) == (7, 8, 9, 255)

    def test_from_image_rejects_non_image(self):
        with pytest.raises(TypeError):
            Raster.from_image("not an image")


class TestRasterAccess:
    """Tests for pixel and region access."""

    def test_get_pixel_clamps_coordinates(self):
        raster = Raster.new(3, 3, (0, 0, 0, 255))
        raster.set_pixel(2, 0, (255, 0, 0, 255))

        assert raster.get_pixel(10, -4) == (255, 0, 0, 255)

    def test_set_pixel_out_of_bounds_raises(self):
        raster = Raster.new(3, 3)

        with pytest.raises(InvalidParameterError):
            raster.set_pixel(3, 0, (0, 0, 0, 255))

    def test_fill_rect_is_inclusive_and_clipped(self):
        raster = Raster.new(5, 5)
        raster.fill_rect(3, 3, 10, 10, (255, 0, 0, 255))

        assert raster.get_pixel(3, 3) == (255, 0, 0, 255)
        assert raster.get_pixel(4, 4) == (255, 0, 0, 255)
        assert raster.get_pixel(2, 2) == (0, 0, 0, 0)

    def test_crop_outside_area_is_transparent(self):
        raster = Raster.new(4, 4, (10, 20, 30, 255))
        cropped = raster.crop(2, 2, 4, 4)

        assert cropped.size == (4, 4)
        assert cropped.get_pixel(0, 0) == (10, 20, 30, 255)
        assert cropped.pixels[3, 3, 3] == 0

    def test_paste_clips_negative_offset(self):
        dst = Raster.new(4, 4, (255, 0, 0, 255))
        src = Raster.new(2, 2, (0, 0, 255, 255))
        dst.paste(src, -1, -1)

        assert dst.get_pixel(0, 0) == (0, 0, 255, 255)
        assert dst.get_pixel(1, 1) == (255, 0, 0, 255)

    def test_paste_without_blend_copies_alpha(self):
        dst = Raster.new(2, 2, (255, 0, 0, 255))
        src = Raster.new(1, 1, (0, 0, 0, 0))
        dst.paste(src, 0, 0, blend=False)

        assert dst.get_pixel(0, 0) == (0, 0, 0, 0)


class TestAlphaOver:
    """Tests for Porter-Duff over compositing."""

    def test_transparent_top_keeps_bottom(self):
        bottom = np.full((1, 1, 4), (0, 0, 0, 255), dtype=np.uint8)
        top = np.full((1, 1, 4), (255, 255, 255, 0), dtype=np.uint8)

        assert tuple(alpha_over(bottom, top)[0, 0]) == (0, 0, 0, 255)

    def test_opaque_top_replaces_bottom(self):
        bottom = np.full((1, 1, 4), (0, 0, 0, 255), dtype=np.uint8)
        top = np.full((1, 1, 4), (10, 200, 30, 255), dtype=np.uint8)

        assert tuple(alpha_over(bottom, top)[0, 0]) == (10, 200, 30, 255)


class TestColorUtils:
    """Tests for rounding and color conversion helpers."""

    def test_round_half_away(self):
        assert round_half_away(2.5) == 3
        assert round_half_away(-2.5) == -3
        assert round_half_away(2.4) == 2

    def test_hsv_white_and_black(self):
        assert rgb_to_hsv((255, 255, 255)) == (0, 0, 100)
        assert rgb_to_hsv((0, 0, 0)) == (0, 0, 0)

    def test_hsv_primaries(self):
        assert rgb_to_hsv((255, 0, 0)) == (0, 100, 100)
        assert rgb_to_hsv((0, 255, 0)) == (120, 100, 100)
        assert rgb_to_hsv((0, 0, 255)) == (240, 100, 100)

    def test_parse_hex_color(self):
        assert parse_hex_color("#fff") == (255, 255, 255, 255)
        assert parse_hex_color("00FF00") == (0, 255, 0, 255)

    @pytest.mark.parametrize("value", ["zzz", "12345", ""])
    def test_parse_hex_color_invalid(self, value):
        with pytest.raises(InvalidParameterError):
            parse_hex_color(value)

    def test_parse_rgb_triplet(self):
        assert parse_rgb_triplet("90, 55, 30") == (90, 55, 30)
        assert parse_rgb_triplet([1, 2, 3]) == (1, 2, 3)

        with pytest.raises(InvalidParameterError):
            parse_rgb_triplet("1, 2")
