"""
Color and numeric helpers shared by the raster operations.

Functions:
    round_half_away: Round to nearest integer, halves away from zero
    clamp: Clamp a number into an inclusive range
    rgb_to_hsv: Convert an RGB triple to integer (degrees, percent, percent)
    parse_hex_color: Parse '#rrggbb' / 'rgb' strings into an RGBA tuple
    parse_rgb_triplet: Parse a comma separated 'r, g, b' string
"""

import math
from typing import Sequence, Tuple

from IU_Libs.constants import OPAQUE
from IU_Libs.errors import InvalidParameterError

RgbaColor = Tuple[int, int, int, int]


def round_half_away(value: float) -> int:
    """Round like the pixel math expects: 2.5 -> 3, -2.5 -> -3."""
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def clamp(value, lower, upper):
    return max(lower, min(value, upper))


def rgb_to_hsv(rgb: Sequence[int]) -> Tuple[int, int, int]:
    """
    Convert an RGB color into HSV.

    Hue uses the six-piece cylindrical formula where the channel holding the
    maximum selects the branch; the normalized [0, 1] values are then scaled
    and rounded.

    Args:
        rgb: Sequence of at least three 0-255 channel values

    Returns:
        (hue in degrees 0-360, saturation 0-100, value 0-100)
    """
    r, g, b = (float(c) for c in rgb[:3])

    min_val = min(r, g, b)
    max_val = max(r, g, b)
    delta = max_val - min_val
    v = max_val / 255.0

    if delta == 0:
        h = 0.0
        s = 0.0
    else:
        h = 0.0
        s = delta / max_val
        del_r = (((max_val - r) / 6.0) + (delta / 2.0)) / delta
        del_g = (((max_val - g) / 6.0) + (delta / 2.0)) / delta
        del_b = (((max_val - b) / 6.0) + (delta / 2.0)) / delta

        if r == max_val:
            h = del_b - del_g
        elif g == max_val:
            h = (1.0 / 3.0) + del_r - del_b
        elif b == max_val:
            h = (2.0 / 3.0) + del_g - del_r

        if h < 0:
            h += 1
        if h > 1:
            h -= 1

    return (
        round_half_away(h * 360),
        round_half_away(s * 100),
        round_half_away(v * 100),
    )


def parse_hex_color(value: str, alpha: int = OPAQUE) -> RgbaColor:
    """
    Parse a hex color string.

    Accepts 'ffffff', '#FFFFFF' and the short 'fff' form.

    Raises:
        InvalidParameterError: If the string is not a hex color
    """
    text = str(value).strip().lstrip("#")
    if len(text) == 3:
        text = "".join(ch * 2 for ch in text)

    if len(text) != 6:
        raise InvalidParameterError(f"Invalid hex color: {value!r}")

    try:
        packed = int(text, 16)
    except ValueError:
        raise InvalidParameterError(f"Invalid hex color: {value!r}")

    return ((packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF, int(alpha))


def parse_rgb_triplet(value) -> Tuple[int, int, int]:
    """Parse '90, 55, 30' (or a 3-sequence) into an int triple."""
    if isinstance(value, str):
        parts = [p.strip() for p in value.split(",")]
    else:
        parts = list(value)

    if len(parts) != 3:
        raise InvalidParameterError(f"Expected three RGB components, got {value!r}")

    try:
        return tuple(int(float(p)) for p in parts)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"Invalid RGB components: {value!r}")
