"""
CodecLib - Encoding, decoding and writing images

Pillow-backed JPEG/PNG/GIF codec, external optimizer wrapper and the
filesystem writer used when saving.
"""

from IU_Libs.CodecLib.image_codec import (
    normalize_format,
    format_for_path,
    png_compress_level,
    decode,
    load_raster,
    encode,
)
from IU_Libs.CodecLib.optimizer import OptimizerConfig, ImageOptimizer
from IU_Libs.CodecLib.output_writer import SaveOptions, OutputWriter

__all__ = [
    "normalize_format",
    "format_for_path",
    "png_compress_level",
    "decode",
    "load_raster",
    "encode",
    "OptimizerConfig",
    "ImageOptimizer",
    "SaveOptions",
    "OutputWriter",
]
