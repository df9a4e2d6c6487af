"""
Resize policies and area-averaging resampling.

The target dimensions are derived from the source size, the requested size
and a ResizePolicy. The pixels are then resampled with an area-averaging
(box) filter: every output pixel is the coverage-weighted mean of the input
pixels its footprint overlaps. Averaging happens in premultiplied alpha so
fully transparent pixels do not bleed their color into neighbours.

Example:
    >>> source = Raster.new(800, 600, (10, 20, 30, 255))
    >>> resized = resize(source, 400, 300, ResizePolicy.AUTO)
    >>> resized.size
    (400, 300)
"""

from enum import Enum
from typing import Tuple, Union

import numpy as np

from IU_Libs.errors import InvalidParameterError
from IU_Libs.RasterLib.color_utils import round_half_away
from IU_Libs.RasterLib.raster import Raster


class ResizePolicy(Enum):
    EXACT = "exact"
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"
    CROP = "crop"
    AUTO = "auto"

    @classmethod
    def parse(cls, value: Union["ResizePolicy", str]) -> "ResizePolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise InvalidParameterError(
                f"Unknown resize policy: {value!r}. Valid policies: {valid}"
            )


def _size_by_fixed_height(source_width: int, source_height: int, target_height: float) -> float:
    return target_height * (source_width / source_height)


def _size_by_fixed_width(source_width: int, source_height: int, target_width: float) -> float:
    return target_width * (source_height / source_width)


def get_dimensions(
    source_width: int,
    source_height: int,
    target_width: int,
    target_height: int,
    policy: Union[ResizePolicy, str] = ResizePolicy.AUTO,
) -> Tuple[float, float]:
    """
    Compute the optimal (unrounded) dimensions for a resize.

    Args:
        source_width: Width of the image being resized
        source_height: Height of the image being resized
        target_width: Requested width
        target_height: Requested height
        policy: ResizePolicy or its string name

    Returns:
        (optimal_width, optimal_height) as floats

    Raises:
        InvalidParameterError: If a size is < 1 or the policy is unknown
    """
    policy = ResizePolicy.parse(policy)

    if source_width < 1 or source_height < 1:
        raise InvalidParameterError(
            f"Source size must be at least 1x1, got {source_width}x{source_height}"
        )
    if target_width < 1 or target_height < 1:
        raise InvalidParameterError(
            f"Target size must be at least 1x1, got {target_width}x{target_height}"
        )

    if policy is ResizePolicy.EXACT:
        return float(target_width), float(target_height)

    if policy is ResizePolicy.PORTRAIT:
        return _size_by_fixed_height(source_width, source_height, target_height), float(target_height)

    if policy is ResizePolicy.LANDSCAPE:
        return float(target_width), _size_by_fixed_width(source_width, source_height, target_width)

    if policy is ResizePolicy.CROP:
        height_ratio = source_height / target_height
        width_ratio = source_width / target_width
        optimal_ratio = min(height_ratio, width_ratio)
        return source_width / optimal_ratio, source_height / optimal_ratio

    # AUTO
    if source_height < source_width:
        return float(target_width), _size_by_fixed_width(source_width, source_height, target_width)
    if source_height > source_width:
        return _size_by_fixed_height(source_width, source_height, target_height), float(target_height)

    # Square source: follow the larger target side
    if target_height < target_width:
        return float(target_width), _size_by_fixed_width(source_width, source_height, target_width)
    if target_height > target_width:
        return _size_by_fixed_height(source_width, source_height, target_height), float(target_height)
    return float(target_width), float(target_height)


def round_dimensions(width: float, height: float) -> Tuple[int, int]:
    """Round computed dimensions for allocation (never below 1)."""
    return max(1, round_half_away(width)), max(1, round_half_away(height))


def area_weights(in_size: int, out_size: int) -> np.ndarray:
    """
    Build the (out_size, in_size) coverage matrix for one axis.

    Row j holds, for every input pixel i, the fraction of output pixel j's
    footprint [j*s, (j+1)*s) (s = in_size / out_size) covered by [i, i+1).
    """
    scale = in_size / out_size
    starts = np.arange(out_size, dtype=np.float64) * scale
    ends = starts + scale
    edges = np.arange(in_size, dtype=np.float64)

    left = np.maximum(starts[:, None], edges[None, :])
    right = np.minimum(ends[:, None], edges[None, :] + 1.0)
    weights = np.clip(right - left, 0.0, None)

    return weights / weights.sum(axis=1, keepdims=True)


def resample(source: Raster, width: int, height: int) -> Raster:
    """
    Resample a raster to width x height with area averaging.

    Returns:
        New Raster of exactly (width, height)
    """
    width = int(width)
    height = int(height)
    if width < 1 or height < 1:
        raise InvalidParameterError(f"Resample size must be at least 1x1, got {width}x{height}")

    if (width, height) == source.size:
        return source.copy()

    wy = area_weights(source.height, height)
    wx = area_weights(source.width, width)

    data = source.pixels.astype(np.float64)
    alpha = data[:, :, 3:4] / 255.0
    data[:, :, :3] *= alpha

    # rows first: (H, W, C) -> (h, W, C), then columns -> (h, w, C)
    rows = np.tensordot(wy, data, axes=(1, 0))
    out = np.tensordot(rows, wx, axes=(1, 1)).transpose(0, 2, 1)

    out_alpha = out[:, :, 3:4] / 255.0
    rgb = out[:, :, :3]
    out[:, :, :3] = np.divide(rgb, out_alpha, out=np.zeros_like(rgb), where=out_alpha > 0)

    return Raster(np.clip(np.floor(out + 0.5), 0, 255).astype(np.uint8))


def center_crop(
    raster: Raster,
    optimal_width: int,
    optimal_height: int,
    target_width: int,
    target_height: int,
) -> Raster:
    """Crop the centered target_width x target_height region."""
    crop_x = round_half_away(optimal_width / 2 - target_width / 2)
    crop_y = round_half_away(optimal_height / 2 - target_height / 2)
    return raster.crop(crop_x, crop_y, target_width, target_height)


def resize(
    source: Raster,
    target_width: int,
    target_height: int,
    policy: Union[ResizePolicy, str] = ResizePolicy.AUTO,
) -> Raster:
    """
    Resize a raster according to a policy.

    With ResizePolicy.CROP the image is first scaled so it covers the target
    and then center-cropped to exactly (target_width, target_height).

    Args:
        source: Raster to resize (left untouched)
        target_width: Requested width in pixels
        target_height: Requested height in pixels
        policy: ResizePolicy or string name ('exact', 'portrait',
                'landscape', 'crop', 'auto')

    Returns:
        New Raster
    """
    policy = ResizePolicy.parse(policy)
    target_width = int(target_width)
    target_height = int(target_height)

    optimal = get_dimensions(source.width, source.height, target_width, target_height, policy)
    optimal_width, optimal_height = round_dimensions(*optimal)

    resized = resample(source, optimal_width, optimal_height)

    if policy is ResizePolicy.CROP:
        resized = center_crop(resized, optimal_width, optimal_height, target_width, target_height)

    return resized
