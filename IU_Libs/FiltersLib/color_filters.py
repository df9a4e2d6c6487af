"""
Color filters delegated to Pillow primitives.

These filters carry no algorithm of their own: each one maps onto a Pillow
kernel, lookup table or conversion applied to the RGB bands while the alpha
band is carried over untouched.

Functions:
    blur: Gaussian (3x3 weighted kernel) or selective (edge-preserving median)
    brightness: Add a constant to every color channel
    contrast: Stretch or squash channels around mid-grey
    greyscale: Luma conversion keeping the RGB layout
    smooth: 3x3 smoothing kernel with a configurable center weight
    colorize: Add a constant per channel
    sepia: Greyscale, darken and tint
"""

import logging
from typing import Any, Callable, Dict, List

from PIL import ImageFilter, ImageOps

from IU_Libs.constants import (
    BRIGHTNESS_LIMIT,
    CONTRAST_LIMIT,
    DEFAULT_BLUR_KIND,
    DEFAULT_BRIGHTNESS,
    DEFAULT_CONTRAST,
    DEFAULT_SEPIA_BRIGHTNESS,
    DEFAULT_SEPIA_RGB,
    DEFAULT_SMOOTH,
    SMOOTH_LIMIT,
)
from IU_Libs.errors import FilterUnavailableError, InvalidParameterError
from IU_Libs.RasterLib.color_utils import clamp, parse_rgb_triplet, round_half_away
from IU_Libs.RasterLib.raster import Raster

logger = logging.getLogger(__name__)


def _pillow_filter(name: str, *args: Any, **kwargs: Any) -> Any:
    """Instantiate an ImageFilter class, failing loudly if Pillow lacks it."""
    filter_cls = getattr(ImageFilter, name, None)
    if filter_cls is None:
        raise FilterUnavailableError(f"Pillow does not provide ImageFilter.{name}")
    return filter_cls(*args, **kwargs)


def _apply_to_rgb(raster: Raster, operation: Callable[[Any], Any]) -> Raster:
    """Run a Pillow operation on the RGB bands and re-attach alpha."""
    image = raster.to_image()
    alpha = image.getchannel("A")
    rgb = operation(image.convert("RGB")).convert("RGB")
    rgb.putalpha(alpha)
    return Raster.from_image(rgb)


def _channel_lut(shift: Callable[[int], float]) -> List[int]:
    return [clamp(round_half_away(shift(value)), 0, 255) for value in range(256)]


# ============================================================================
# Blur
# ============================================================================

def gaussian_blur(raster: Raster) -> Raster:
    kernel = _pillow_filter("Kernel", (3, 3), [1, 2, 1, 2, 4, 2, 1, 2, 1], scale=16)
    return _apply_to_rgb(raster, lambda img: img.filter(kernel))


def selective_blur(raster: Raster) -> Raster:
    median = _pillow_filter("MedianFilter", size=3)
    return _apply_to_rgb(raster, lambda img: img.filter(median))


BLUR_KINDS: Dict[str, Callable[[Raster], Raster]] = {
    "gaussian": gaussian_blur,
    "selective": selective_blur,
}


def blur(raster: Raster, kind: str = DEFAULT_BLUR_KIND) -> Raster:
    """
    Blur a raster.

    Args:
        raster: Raster to blur (left untouched)
        kind: 'gaussian' or 'selective'

    Returns:
        New Raster

    Raises:
        InvalidParameterError: If kind is unknown
        FilterUnavailableError: If the Pillow primitive is missing
    """
    kind_key = str(kind).strip().lower()
    if kind_key not in BLUR_KINDS:
        raise InvalidParameterError(
            f"Unknown blur kind: {kind}. Valid kinds: {', '.join(sorted(BLUR_KINDS))}"
        )
    logger.debug(f"Applying {kind_key} blur to {raster.width}x{raster.height} raster")
    return BLUR_KINDS[kind_key](raster)


# ============================================================================
# Tone
# ============================================================================

def brightness(raster: Raster, value: int = DEFAULT_BRIGHTNESS) -> Raster:
    """Add ``value`` (clamped to -255..255) to every color channel."""
    value = clamp(int(value), -BRIGHTNESS_LIMIT, BRIGHTNESS_LIMIT)
    lut = _channel_lut(lambda c: c + value)
    return _apply_to_rgb(raster, lambda img: img.point(lut * 3))


def contrast(raster: Raster, value: int = DEFAULT_CONTRAST) -> Raster:
    """
    Change contrast; negative values increase it, positive values reduce it.

    Each channel is scaled around mid-grey by ((100 - value) / 100) squared.
    """
    value = clamp(int(value), -CONTRAST_LIMIT, CONTRAST_LIMIT)
    factor = ((100.0 - value) / 100.0) ** 2
    lut = _channel_lut(lambda c: ((c / 255.0 - 0.5) * factor + 0.5) * 255.0)
    return _apply_to_rgb(raster, lambda img: img.point(lut * 3))


def greyscale(raster: Raster) -> Raster:
    return _apply_to_rgb(raster, ImageOps.grayscale)


def colorize(raster: Raster, rgb: Any) -> Raster:
    red, green, blue = parse_rgb_triplet(rgb)
    lut = (
        _channel_lut(lambda c: c + red)
        + _channel_lut(lambda c: c + green)
        + _channel_lut(lambda c: c + blue)
    )
    return _apply_to_rgb(raster, lambda img: img.point(lut))


def smooth(raster: Raster, value: int = DEFAULT_SMOOTH) -> Raster:
    """
    Smooth with a 3x3 kernel whose center weight is ``value``.

    The value is clamped to -12..12; -8 would make the kernel sum to zero and
    is rejected.
    """
    weight = clamp(int(value), -SMOOTH_LIMIT, SMOOTH_LIMIT)
    scale = weight + 8
    if scale == 0:
        logger.warning("Rejected smooth value -8 (zero kernel sum)")
        raise InvalidParameterError("smooth value -8 makes the kernel weights sum to 0")

    kernel = _pillow_filter("Kernel", (3, 3), [1, 1, 1, 1, weight, 1, 1, 1, 1], scale=scale)
    return _apply_to_rgb(raster, lambda img: img.filter(kernel))


def sepia(
    raster: Raster,
    rgb: Any = DEFAULT_SEPIA_RGB,
    brightness_value: int = DEFAULT_SEPIA_BRIGHTNESS,
) -> Raster:
    """
    Sepia tone: greyscale, adjust brightness, then tint.

    Args:
        raster: Raster to tone (left untouched)
        rgb: Tint as 'r, g, b' string or 3-sequence (default '90, 55, 30')
        brightness_value: Brightness shift applied before tinting
    """
    tint = parse_rgb_triplet(rgb)
    toned = greyscale(raster)
    toned = brightness(toned, brightness_value)
    return colorize(toned, tint)
