"""
RasterLib - Pixel buffer and geometric operations

This module provides the Raster buffer plus resampling, convolution,
sharpening and rotation for the Image Util project.
"""

from IU_Libs.RasterLib.raster import Raster, RgbaColor, alpha_over
from IU_Libs.RasterLib.color_utils import (
    round_half_away,
    rgb_to_hsv,
    parse_hex_color,
)
from IU_Libs.RasterLib.resampler import (
    ResizePolicy,
    get_dimensions,
    resample,
    center_crop,
    resize,
)
from IU_Libs.RasterLib.convolution import Kernel, convolve
from IU_Libs.RasterLib.sharpener import (
    find_sharpness,
    build_sharpen_kernel,
    sharpen_if_needed,
)
from IU_Libs.RasterLib.rotator import (
    TRANSPARENT,
    parse_background,
    normalize_angle,
    rotate,
)

__all__ = [
    "Raster",
    "RgbaColor",
    "alpha_over",
    "round_half_away",
    "rgb_to_hsv",
    "parse_hex_color",
    "ResizePolicy",
    "get_dimensions",
    "resample",
    "center_crop",
    "resize",
    "Kernel",
    "convolve",
    "find_sharpness",
    "build_sharpen_kernel",
    "sharpen_if_needed",
    "TRANSPARENT",
    "parse_background",
    "normalize_angle",
    "rotate",
]
