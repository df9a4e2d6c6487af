"""
Arbitrary-angle rotation.

Positive angles rotate counter-clockwise. Right angles are exact array
rotations; every other angle uses inverse mapping with nearest-neighbour
sampling (no antialiasing) into a canvas sized to the rotated bounding box,
with uncovered pixels set to the background color.

Example:
    >>> raster = Raster.new(40, 20, (255, 0, 0, 255))
    >>> rotate(raster, 90).size
    (20, 40)
    >>> int(rotate(raster, 30, background=TRANSPARENT).pixels[0, 0, 3])
    0
"""

import math
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from IU_Libs.constants import (
    ALPHA_BACKGROUND,
    ANGLE_LIMIT,
    RANDOM_ANGLE_RANGE,
    TRANSPARENT_COLOR,
    WHITE,
)
from IU_Libs.errors import InvalidParameterError
from IU_Libs.RasterLib.color_utils import clamp, parse_hex_color, round_half_away
from IU_Libs.RasterLib.raster import Raster, RgbaColor

TRANSPARENT: RgbaColor = TRANSPARENT_COLOR

Angle = Union[float, int, str]
Background = Union[str, Sequence[int], None]


def parse_background(value: Background) -> RgbaColor:
    """
    Convert a background value into an RGBA color.

    Args:
        value: None (white), 'alpha' (transparent), a hex string such as
               'ffffff' or '#000', or an RGB/RGBA sequence

    Returns:
        RGBA tuple
    """
    if value is None:
        return WHITE

    if isinstance(value, str):
        if value.strip().lower() == ALPHA_BACKGROUND:
            return TRANSPARENT
        return parse_hex_color(value)

    values = [int(v) for v in value]
    if len(values) == 3:
        values.append(255)
    if len(values) != 4:
        raise InvalidParameterError(f"Background must be RGB or RGBA, got {value!r}")
    return tuple(clamp(v, 0, 255) for v in values)


def normalize_angle(angle: Angle, rng: Optional[np.random.Generator] = None) -> float:
    """
    Bring an angle into [0, 360).

    The string 'random' picks a whole angle in [-6, 6]. Numeric angles are
    clamped to [-360, 360] and negative values are mapped to 360 + angle.
    """
    if isinstance(angle, str):
        if angle.strip().lower() == "random":
            rng = rng if rng is not None else np.random.default_rng()
            low, high = RANDOM_ANGLE_RANGE
            angle = int(rng.integers(low, high + 1))
        else:
            try:
                angle = float(angle)
            except ValueError:
                raise InvalidParameterError(f"Invalid rotation angle: {angle!r}")

    angle = clamp(float(angle), -ANGLE_LIMIT, ANGLE_LIMIT)
    if angle < 0:
        angle = ANGLE_LIMIT + angle
    return angle % ANGLE_LIMIT


def rotated_size(width: int, height: int, angle: float) -> Tuple[int, int]:
    """Size of the bounding box of a width x height image rotated by angle degrees."""
    theta = math.radians(angle)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)

    half_w = width / 2.0
    half_h = height / 2.0
    corners = [(-half_w, -half_h), (half_w, -half_h), (half_w, half_h), (-half_w, half_h)]
    xs = [x * cos_t + y * sin_t for x, y in corners]
    ys = [-x * sin_t + y * cos_t for x, y in corners]

    return (
        max(1, round_half_away(max(xs) - min(xs))),
        max(1, round_half_away(max(ys) - min(ys))),
    )


def rotate(
    src: Raster,
    angle: Angle,
    background: Background = WHITE,
    rng: Optional[np.random.Generator] = None,
) -> Raster:
    """
    Rotate a raster counter-clockwise.

    Args:
        src: Raster to rotate (left untouched)
        angle: Degrees, or 'random'
        background: Fill for uncovered pixels (see parse_background)
        rng: Generator used for 'random' angles

    Returns:
        New Raster sized to the rotated bounding box
    """
    angle = normalize_angle(angle, rng)
    fill = parse_background(background)

    if angle == 0:
        return src.copy()
    if angle in (90, 180, 270):
        return Raster(np.rot90(src.pixels, k=int(angle) // 90))

    theta = math.radians(angle)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)

    width, height = src.size
    new_width, new_height = rotated_size(width, height, angle)

    # Destination pixel centres relative to the destination centre; each maps
    # back to the source pixel containing the rotated point
    xs = np.arange(new_width, dtype=np.float64) + 0.5 - new_width / 2.0
    ys = np.arange(new_height, dtype=np.float64) + 0.5 - new_height / 2.0
    dest_x, dest_y = np.meshgrid(xs, ys)

    src_x = np.floor(dest_x * cos_t - dest_y * sin_t + width / 2.0).astype(np.int64)
    src_y = np.floor(dest_x * sin_t + dest_y * cos_t + height / 2.0).astype(np.int64)

    inside = (src_x >= 0) & (src_x < width) & (src_y >= 0) & (src_y < height)

    result = Raster.new(new_width, new_height, fill)
    result.pixels[inside] = src.pixels[src_y[inside], src_x[inside]]
    return result
