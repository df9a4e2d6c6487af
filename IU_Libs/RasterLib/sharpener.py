"""
Automatic sharpening applied once before the first export.

The strength is fitted from how much the image was scaled: the final width
is first rescaled to a 750px reference, then fed through a quadratic fit.
The fitted value ends up as the kernel divisor, so a larger value means a
milder effect; the strongest sharpening lands around 300px on the
reference scale.
"""

import logging
from typing import Any

from IU_Libs.constants import (
    SHARPEN_CENTER_BIAS,
    SHARPEN_COEFF_A,
    SHARPEN_COEFF_B,
    SHARPEN_COEFF_C,
    SHARPEN_REFERENCE_WIDTH,
)
from IU_Libs.errors import InvalidParameterError
from IU_Libs.RasterLib.color_utils import round_half_away
from IU_Libs.RasterLib.convolution import Kernel, convolve

logger = logging.getLogger(__name__)


def find_sharpness(original_width: int, final_width: int) -> int:
    """
    Find the sharpening strength for a resize.

    Args:
        original_width: Width of the decoded source
        final_width: Width after resizing

    Returns:
        Non-negative integer strength (0 means no sharpening)
    """
    if original_width <= 0:
        raise InvalidParameterError(f"original_width must be > 0, got {original_width}")

    final = final_width * (SHARPEN_REFERENCE_WIDTH / original_width)
    result = SHARPEN_COEFF_A + SHARPEN_COEFF_B * final + SHARPEN_COEFF_C * final * final
    return max(round_half_away(result), 0)


def build_sharpen_kernel(sharpness: int) -> Kernel:
    return Kernel.from_rows(
        [
            [-1, -2, -1],
            [-2, sharpness + SHARPEN_CENTER_BIAS, -2],
            [-1, -2, -1],
        ],
        divisor=sharpness,
        offset=0,
    )


def sharpen_if_needed(state: Any) -> bool:
    """
    Sharpen the working raster of a PipelineState if it is still pending.

    Runs only when sharpening is enabled and nothing was exported yet. The
    caller marks the state exported afterwards, so this happens at most once
    per resize.

    Args:
        state: PipelineState holding the working raster

    Returns:
        True if a convolution was applied
    """
    if not state.sharpen_enabled or state.exported:
        return False

    sharpness = find_sharpness(state.source_width, state.optimal_width)
    if sharpness == 0:
        logger.debug(
            f"Sharpness is 0 for {state.source_width}px -> {state.optimal_width}px, skipping"
        )
        return False

    state.working = convolve(state.working, build_sharpen_kernel(sharpness))
    logger.debug(f"Applied sharpen kernel with strength {sharpness}")
    return True
