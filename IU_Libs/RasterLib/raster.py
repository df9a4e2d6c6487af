"""
Raster pixel buffer for Image Util.

A Raster owns a ``(height, width, 4)`` uint8 numpy array holding straight
(non-premultiplied) RGBA pixels, 255 meaning opaque. Every operation in the
library consumes and produces Rasters; Pillow is only used at the edges
(decode/encode, drawing, color filter primitives).

Classes:
    Raster: Mutable RGBA pixel buffer with clamped reads and region helpers

Functions:
    alpha_over: Composite one RGBA array over another (Porter-Duff "over")
    clip_regions: Intersect a placed region with a buffer
"""

from typing import Any, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

from IU_Libs.constants import CHANNELS
from IU_Libs.errors import InvalidParameterError

RgbaColor = Tuple[int, int, int, int]


def _as_rgba(color: Sequence[int]) -> RgbaColor:
    values = [int(c) for c in color]
    if len(values) == 3:
        values.append(255)
    if len(values) != 4:
        raise InvalidParameterError(f"Expected RGB or RGBA color, got {color!r}")
    return tuple(max(0, min(255, v)) for v in values)


def alpha_over(bottom: np.ndarray, top: np.ndarray) -> np.ndarray:
    """
    Composite ``top`` over ``bottom``.

    Args:
        bottom: (H, W, 4) uint8 RGBA array
        top: (H, W, 4) uint8 RGBA array of the same shape

    Returns:
        New (H, W, 4) uint8 array
    """
    b = bottom.astype(np.float64) / 255.0
    t = top.astype(np.float64) / 255.0

    ta = t[:, :, 3:4]
    ba = b[:, :, 3:4]
    out_a = ta + ba * (1.0 - ta)

    premul = t[:, :, :3] * ta + b[:, :, :3] * ba * (1.0 - ta)
    out_rgb = np.divide(premul, out_a, out=np.zeros_like(premul), where=out_a > 0)

    result = np.concatenate([out_rgb, out_a], axis=2) * 255.0
    return np.clip(np.floor(result + 0.5), 0, 255).astype(np.uint8)


class Raster:
    """
    Mutable RGBA pixel buffer.

    The buffer is never shared: constructing a Raster from an array copies
    it, and structural operations elsewhere allocate new Rasters.

    Example:
        >>> raster = Raster.new(4, 3, (255, 0, 0, 255))
        >>> raster.size
        (4, 3)
        >>> raster.get_pixel(-5, 10)
        (255, 0, 0, 255)
    """

    def __init__(self, pixels: np.ndarray):
        array = np.array(pixels, dtype=np.uint8, copy=True, order="C")
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise InvalidParameterError(
                f"Raster pixels must have shape (height, width, 4), got {array.shape}"
            )
        if array.shape[0] < 1 or array.shape[1] < 1:
            raise InvalidParameterError(
                f"Raster must be at least 1x1, got {array.shape[1]}x{array.shape[0]}"
            )
        self.pixels = array

    @classmethod
    def new(cls, width: int, height: int, fill: Sequence[int] = (0, 0, 0, 0)) -> "Raster":
        """Allocate a width x height raster filled with one color."""
        width = int(width)
        height = int(height)
        if width < 1 or height < 1:
            raise InvalidParameterError(f"Raster size must be at least 1x1, got {width}x{height}")

        pixels = np.empty((height, width, CHANNELS), dtype=np.uint8)
        pixels[:, :] = _as_rgba(fill)
        return cls(pixels)

    @classmethod
    def from_image(cls, image: Any) -> "Raster":
        """Build a raster from a PIL Image (converted to RGBA)."""
        if not hasattr(image, "convert"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")
        return cls(np.asarray(image.convert("RGBA"), dtype=np.uint8))

    def to_image(self) -> Any:
        """Return an RGBA PIL Image copy of the buffer."""
        return Image.fromarray(self.pixels.copy())

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def copy(self) -> "Raster":
        return Raster(self.pixels)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_pixel(self, x: int, y: int) -> RgbaColor:
        """Read a pixel, clamping the coordinates to the nearest edge."""
        cx = max(0, min(int(x), self.width - 1))
        cy = max(0, min(int(y), self.height - 1))
        return tuple(int(c) for c in self.pixels[cy, cx])

    def set_pixel(self, x: int, y: int, color: Sequence[int]) -> None:
        if not self.in_bounds(x, y):
            raise InvalidParameterError(
                f"Pixel ({x}, {y}) outside {self.width}x{self.height} raster"
            )
        self.pixels[int(y), int(x)] = _as_rgba(color)

    def fill_rect(self, x0: int, y0: int, x1: int, y1: int, color: Sequence[int]) -> None:
        """Fill the inclusive rectangle (x0, y0)-(x1, y1), clipped to the raster."""
        left = max(0, min(x0, x1))
        top = max(0, min(y0, y1))
        right = min(self.width - 1, max(x0, x1))
        bottom = min(self.height - 1, max(y0, y1))
        if left > right or top > bottom:
            return
        self.pixels[top:bottom + 1, left:right + 1] = _as_rgba(color)

    def crop(self, x: int, y: int, width: int, height: int) -> "Raster":
        """
        Copy a region into a new raster.

        Parts of the region outside this raster come out fully transparent.
        """
        result = Raster.new(width, height)
        src_box, dst_box = clip_regions(self.size, (x, y), (width, height))
        if src_box is not None:
            sx0, sy0, sx1, sy1 = src_box
            dx0, dy0, dx1, dy1 = dst_box
            result.pixels[dy0:dy1, dx0:dx1] = self.pixels[sy0:sy1, sx0:sx1]
        return result

    def paste(self, src: "Raster", x: int, y: int, blend: bool = True) -> None:
        """
        Draw ``src`` onto this raster with its top-left corner at (x, y).

        Args:
            src: Raster to draw
            x: Destination x (may be negative, clipped)
            y: Destination y (may be negative, clipped)
            blend: Alpha-composite ("over") when True, plain copy otherwise
        """
        # Region of this raster covered by src, expressed in src coordinates
        src_box, dst_box = clip_regions(src.size, (-x, -y), self.size)
        if src_box is None:
            return
        sx0, sy0, sx1, sy1 = src_box
        dx0, dy0, dx1, dy1 = dst_box

        top = src.pixels[sy0:sy1, sx0:sx1]
        if blend:
            bottom = self.pixels[dy0:dy1, dx0:dx1]
            self.pixels[dy0:dy1, dx0:dx1] = alpha_over(bottom, top)
        else:
            self.pixels[dy0:dy1, dx0:dx1] = top

    def __repr__(self) -> str:
        return f"Raster(width={self.width}, height={self.height})"


def clip_regions(
    source_size: Tuple[int, int],
    origin: Tuple[int, int],
    region_size: Tuple[int, int],
) -> Tuple[Optional[Tuple[int, int, int, int]], Optional[Tuple[int, int, int, int]]]:
    """
    Intersect a region placed at ``origin`` with a source of ``source_size``.

    Returns:
        (source box, region box) as (x0, y0, x1, y1) half-open boxes, or
        (None, None) when they do not overlap
    """
    src_w, src_h = source_size
    ox, oy = int(origin[0]), int(origin[1])
    reg_w, reg_h = int(region_size[0]), int(region_size[1])

    sx0 = max(0, ox)
    sy0 = max(0, oy)
    sx1 = min(src_w, ox + reg_w)
    sy1 = min(src_h, oy + reg_h)
    if sx0 >= sx1 or sy0 >= sy1:
        return None, None

    return (sx0, sy0, sx1, sy1), (sx0 - ox, sy0 - oy, sx1 - ox, sy1 - oy)
