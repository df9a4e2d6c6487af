"""
Artistic Filter Operations.

Provides block-based and randomized distortions:
- Pixelate: Replace each block with its mean color
- Rasterbate: Halftone-like discs sized by block darkness
- Scatter: Randomly swap pixels with nearby pixels
- Noise: Random brightness jitter on half of the pixels
- Interlace: Black out every odd scanline

Randomized filters take a ``numpy.random.Generator`` so results can be
reproduced with a seed.

Example:
    >>> raster = Raster.new(100, 80, (200, 120, 40, 255))
    >>>
    >>> # Chunky pixels
    >>> pixelate(raster, block_size=8)
    >>>
    >>> # Repeatable scatter
    >>> scatter(raster, intensity=4, rng=np.random.default_rng(7))
"""

from typing import Iterator, Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw

from IU_Libs.constants import (
    BLACK,
    DEFAULT_NOISE_INTENSITY,
    DEFAULT_PIXELATE_BLOCK,
    DEFAULT_RASTERBATE_BLOCK,
    DEFAULT_SCATTER_INTENSITY,
    NOISE_LIMIT,
    WHITE,
)
from IU_Libs.errors import InvalidParameterError
from IU_Libs.RasterLib.color_utils import clamp, rgb_to_hsv
from IU_Libs.RasterLib.raster import Raster


def _check_block_size(block_size: int) -> int:
    block_size = int(block_size)
    if block_size < 1:
        raise InvalidParameterError(f"block_size must be >= 1, got {block_size}")
    return block_size


def _rng_or_default(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def iter_block_means(pixels: np.ndarray, block_size: int) -> Iterator[Tuple[int, int, Tuple[int, ...]]]:
    """
    Yield (x, y, mean RGBA) for every block, columns outer, rows inner.

    Samples of an edge block that fall outside the image count as the
    block's anchor (top-left) pixel, so every mean is taken over
    block_size * block_size samples.
    """
    height, width = pixels.shape[:2]
    samples = block_size * block_size

    for x in range(0, width, block_size):
        for y in range(0, height, block_size):
            block = pixels[y:y + block_size, x:x + block_size]
            inside = block.shape[0] * block.shape[1]

            total = block.reshape(-1, 4).sum(axis=0, dtype=np.int64)
            total += (samples - inside) * pixels[y, x].astype(np.int64)

            mean = np.floor(total / samples + 0.5).astype(np.int64)
            yield x, y, tuple(int(c) for c in mean)


# ============================================================================
# Pixelate
# ============================================================================

def pixelate(raster: Raster, block_size: int = DEFAULT_PIXELATE_BLOCK) -> Raster:
    """
    Pixelate a raster in place.

    Args:
        raster: Raster to modify
        block_size: Side of the square blocks in pixels (>= 1)

    Returns:
        The same Raster
    """
    block_size = _check_block_size(block_size)
    source = raster.pixels.copy()

    for x, y, color in iter_block_means(source, block_size):
        raster.fill_rect(x, y, x + block_size - 1, y + block_size - 1, color)

    return raster


# ============================================================================
# Rasterbate
# ============================================================================

def disc_diameter(block_size: int, rgb: Tuple[int, int, int]) -> int:
    """Darker blocks get bigger discs: block_size * (100 - V) / 100, rounded."""
    value = rgb_to_hsv(rgb)[2]
    return int(np.floor(block_size * ((100 - value) / 100.0) + 0.5))


def rasterbate(raster: Raster, block_size: int = DEFAULT_RASTERBATE_BLOCK) -> Raster:
    """
    Render the raster as filled discs on a white background.

    Each block's mean color is drawn as a disc centered in the block whose
    diameter grows with the block's darkness.

    Args:
        raster: Source raster (left untouched)
        block_size: Block side and maximum disc diameter in pixels (>= 1)

    Returns:
        New opaque Raster of the same size
    """
    block_size = _check_block_size(block_size)

    canvas = Image.new("RGBA", raster.size, WHITE)
    draw = ImageDraw.Draw(canvas)

    for x, y, color in iter_block_means(raster.pixels, block_size):
        rgb = color[:3]
        diameter = disc_diameter(block_size, rgb)
        if diameter <= 0:
            continue

        # Centered on the pixel at half the block size
        x0 = x + block_size // 2 - diameter // 2
        y0 = y + block_size // 2 - diameter // 2
        draw.ellipse(
            [x0, y0, x0 + diameter - 1, y0 + diameter - 1],
            fill=(rgb[0], rgb[1], rgb[2], 255),
        )

    return Raster.from_image(canvas)


# ============================================================================
# Scatter
# ============================================================================

def scatter(
    raster: Raster,
    intensity: int = DEFAULT_SCATTER_INTENSITY,
    rng: Optional[np.random.Generator] = None,
) -> Raster:
    """
    Swap every pixel with a random neighbour, in place.

    Pixels are visited column by column (x outer, y inner). For each one an
    offset in [-intensity, intensity] is drawn per axis and, when the target
    lies inside the image, the two pixels are swapped. Later swaps can move
    pixels that were already scattered.

    Args:
        raster: Raster to modify
        intensity: Maximum offset in pixels (negative values count as 0)
        rng: Random generator (fresh unseeded one if None)

    Returns:
        The same Raster
    """
    intensity = max(0, int(intensity))
    if intensity == 0:
        return raster

    rng = _rng_or_default(rng)
    width, height = raster.size

    # One 32-bit word per pixel makes the swaps cheap
    packed = np.ascontiguousarray(raster.pixels).view(np.uint32).reshape(-1)
    pixels = packed.tolist()
    offsets = rng.integers(-intensity, intensity + 1, size=(width * height, 2)).tolist()

    index = 0
    for x in range(width):
        for y in range(height):
            dist_x, dist_y = offsets[index]
            index += 1

            target_x = x + dist_x
            target_y = y + dist_y
            if target_x < 0 or target_x >= width or target_y < 0 or target_y >= height:
                continue

            a = y * width + x
            b = target_y * width + target_x
            pixels[a], pixels[b] = pixels[b], pixels[a]

    raster.pixels = np.array(pixels, dtype=np.uint32).view(np.uint8).reshape(height, width, 4)
    return raster


# ============================================================================
# Noise
# ============================================================================

def noise(
    raster: Raster,
    intensity: int = DEFAULT_NOISE_INTENSITY,
    rng: Optional[np.random.Generator] = None,
) -> Raster:
    """
    Add random brightness jitter, in place.

    Each pixel has a 50% chance of receiving one random delta in
    [-intensity, intensity], added to R, G and B alike and clamped to 0-255.
    Alpha is left alone.

    Args:
        raster: Raster to modify
        intensity: Maximum delta, clamped to 0-255
        rng: Random generator (fresh unseeded one if None)

    Returns:
        The same Raster
    """
    intensity = clamp(int(intensity), 0, NOISE_LIMIT)
    rng = _rng_or_default(rng)
    height, width = raster.height, raster.width

    hit = rng.integers(0, 2, size=(height, width)).astype(bool)
    delta = rng.integers(-intensity, intensity + 1, size=(height, width))
    delta = np.where(hit, delta, 0)

    rgb = raster.pixels[:, :, :3].astype(np.int16) + delta[:, :, None].astype(np.int16)
    raster.pixels[:, :, :3] = np.clip(rgb, 0, 255).astype(np.uint8)
    return raster


# ============================================================================
# Interlace
# ============================================================================

def interlace(raster: Raster) -> Raster:
    """Overwrite every odd-indexed scanline with opaque black, in place."""
    raster.pixels[1::2, :] = BLACK
    return raster
