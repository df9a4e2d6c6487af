"""
FiltersLib - Artistic and color filters

Block-based artistic filters implemented on the Raster buffer, plus the
simple color filters delegated to Pillow.
"""

from IU_Libs.FiltersLib.artistic_filters import (
    pixelate,
    rasterbate,
    scatter,
    noise,
    interlace,
)
from IU_Libs.FiltersLib.color_filters import (
    blur,
    brightness,
    contrast,
    greyscale,
    smooth,
    colorize,
    sepia,
)

__all__ = [
    "pixelate",
    "rasterbate",
    "scatter",
    "noise",
    "interlace",
    "blur",
    "brightness",
    "contrast",
    "greyscale",
    "smooth",
    "colorize",
    "sepia",
]
