"""
Generic NxN convolution for rasters.

For every pixel the NxN neighbourhood (edges clamped to the nearest pixel)
is weighted by the kernel matrix, divided by the divisor and shifted by the
offset; each channel, alpha included, is then rounded and clamped to 0-255.
The kernel is applied as a correlation: ``matrix[j][i]`` weights the pixel
at ``(x + i - N//2, y + j - N//2)``.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
from scipy import ndimage

from IU_Libs.errors import InvalidParameterError
from IU_Libs.RasterLib.raster import Raster


@dataclass(frozen=True)
class Kernel:
    """Convolution kernel.

    Attributes:
        matrix: Square matrix with an odd side length, rows top to bottom
        divisor: Value the weighted sum is divided by (must not be 0)
        offset: Value added after the division
    """
    matrix: Tuple[Tuple[float, ...], ...]
    divisor: float = 1.0
    offset: float = 0.0

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]], divisor: float = 1.0, offset: float = 0.0) -> "Kernel":
        return cls(
            matrix=tuple(tuple(float(v) for v in row) for row in rows),
            divisor=float(divisor),
            offset=float(offset),
        )

    @classmethod
    def identity(cls, size: int = 3) -> "Kernel":
        rows = [[0.0] * size for _ in range(size)]
        rows[size // 2][size // 2] = 1.0
        return cls.from_rows(rows)

    def as_array(self) -> np.ndarray:
        array = np.asarray(self.matrix, dtype=np.float64)
        if array.ndim != 2 or array.shape[0] != array.shape[1]:
            raise InvalidParameterError(f"Kernel matrix must be square, got shape {array.shape}")
        if array.shape[0] % 2 == 0:
            raise InvalidParameterError(f"Kernel size must be odd, got {array.shape[0]}")
        return array


def convolve(src: Raster, kernel: Kernel) -> Raster:
    """
    Apply a kernel to every channel of a raster.

    Args:
        src: Raster to filter (left untouched)
        kernel: Kernel with matrix, divisor and offset

    Returns:
        New Raster of the same size

    Raises:
        InvalidParameterError: If the divisor is 0 or the matrix is malformed
    """
    if kernel.divisor == 0:
        raise InvalidParameterError("Kernel divisor must not be 0")

    weights = kernel.as_array()
    data = src.pixels.astype(np.float64)
    result = np.empty_like(data)

    for channel in range(data.shape[2]):
        result[:, :, channel] = ndimage.correlate(data[:, :, channel], weights, mode="nearest")

    result = result / kernel.divisor + kernel.offset
    return Raster(np.clip(np.floor(result + 0.5), 0, 255).astype(np.uint8))
