"""
Alpha-aware layer compositing.

Merges a foreground Raster onto a background Raster at an offset with a
transparency percentage. Watermarking and mask/frame overlays are built on
the same primitive.

Example:
    >>> photo = Raster.new(200, 100, (0, 0, 255, 255))
    >>> logo = Raster.new(20, 10, (255, 255, 255, 255))
    >>> x, y = watermark_position(200, 100, 20, 10, padding=2, corner="BR")
    >>> alpha_merge(photo, logo, x, y, percent=40)
"""

import logging
from typing import Optional, Tuple

import numpy as np

from IU_Libs.constants import (
    DEFAULT_WATERMARK_CORNER,
    PERCENT_MAX,
    TRANSPARENT_COLOR,
    WATERMARK_CORNERS,
)
from IU_Libs.RasterLib.color_utils import clamp
from IU_Libs.RasterLib.raster import Raster, clip_regions
from IU_Libs.RasterLib.rotator import Background, parse_background

logger = logging.getLogger(__name__)


def alpha_merge(
    dst: Raster,
    src: Raster,
    dst_x: int,
    dst_y: int,
    src_x: int = 0,
    src_y: int = 0,
    src_width: Optional[int] = None,
    src_height: Optional[int] = None,
    percent: float = PERCENT_MAX,
) -> Raster:
    """
    Merge ``src`` onto ``dst`` keeping the overlay's own alpha.

    The destination region under the overlay is copied into a transparent
    scratch buffer, the overlay is composited onto the scratch buffer, and
    the scratch buffer is blended back with weight ``percent / 100`` on all
    four channels. Only the clipped overlay region of ``dst`` changes.

    Args:
        dst: Raster to modify
        src: Overlay raster
        dst_x: Destination x of the overlay's top-left corner
        dst_y: Destination y of the overlay's top-left corner
        src_x: Left edge of the overlay area taken from ``src``
        src_y: Top edge of the overlay area taken from ``src``
        src_width: Width of that area (rest of ``src`` if None)
        src_height: Height of that area (rest of ``src`` if None)
        percent: Blend weight, clamped to 0-100

    Returns:
        ``dst``
    """
    percent = clamp(float(percent), 0.0, float(PERCENT_MAX))
    width = src.width - src_x if src_width is None else int(src_width)
    height = src.height - src_y if src_height is None else int(src_height)
    if width < 1 or height < 1:
        return dst

    dst_box, scratch_box = clip_regions(dst.size, (dst_x, dst_y), (width, height))
    if dst_box is None:
        logger.debug(f"Overlay at ({dst_x}, {dst_y}) falls outside {dst.width}x{dst.height}")
        return dst

    scratch = dst.crop(dst_x, dst_y, width, height)
    scratch.paste(src.crop(src_x, src_y, width, height), 0, 0, blend=True)

    dx0, dy0, dx1, dy1 = dst_box
    sx0, sy0, sx1, sy1 = scratch_box
    weight = percent / PERCENT_MAX

    under = dst.pixels[dy0:dy1, dx0:dx1].astype(np.float64)
    over = scratch.pixels[sy0:sy1, sx0:sx1].astype(np.float64)
    blended = under * (1.0 - weight) + over * weight
    dst.pixels[dy0:dy1, dx0:dx1] = np.clip(np.floor(blended + 0.5), 0, 255).astype(np.uint8)

    return dst


def watermark_position(
    canvas_width: int,
    canvas_height: int,
    mark_width: int,
    mark_height: int,
    padding: int,
    corner: str = DEFAULT_WATERMARK_CORNER,
) -> Tuple[int, int]:
    """
    Top-left position of a watermark placed in one corner.

    Corners are 'TL', 'TR', 'BL' and 'BR' (case-insensitive); anything else
    falls back to 'BR'.
    """
    padding = int(padding)
    corner_key = str(corner).strip().upper()
    if corner_key not in WATERMARK_CORNERS:
        corner_key = DEFAULT_WATERMARK_CORNER

    left = padding
    right = canvas_width - mark_width - padding
    top = padding
    bottom = canvas_height - mark_height - padding

    x = left if corner_key in ("TL", "BL") else right
    y = top if corner_key in ("TL", "TR") else bottom
    return x, y


def build_mask_canvas(
    working: Raster,
    overlay: Raster,
    top: int = 0,
    left: int = 0,
    background: Background = None,
) -> Raster:
    """
    Frame ``working`` with a mask overlay.

    Args:
        working: Image placed under the mask
        overlay: Mask raster; the result takes its size
        top: y offset of ``working`` on the canvas
        left: x offset of ``working`` on the canvas
        background: Fill of the uncovered area (transparent if None)

    Returns:
        New Raster the size of ``overlay``
    """
    fill = TRANSPARENT_COLOR if background is None else parse_background(background)

    canvas = Raster.new(overlay.width, overlay.height, fill)
    canvas.paste(working, int(left), int(top), blend=True)
    canvas.paste(overlay, 0, 0, blend=True)
    return canvas
