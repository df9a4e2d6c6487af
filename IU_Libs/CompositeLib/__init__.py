"""
CompositeLib - Alpha-aware compositing for watermarks and masks
"""

from IU_Libs.CompositeLib.compositor import (
    alpha_merge,
    watermark_position,
    build_mask_canvas,
)

__all__ = [
    "alpha_merge",
    "watermark_position",
    "build_mask_canvas",
]
