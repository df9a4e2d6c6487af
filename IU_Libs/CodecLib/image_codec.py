"""
Image codec for Image Util.

Converts between encoded JPEG/PNG/GIF bytes and Raster buffers using Pillow.
The format is identified from the file signature on decode and from the
extension or format name on encode.

Functions:
    normalize_format: Map 'jpg', '.png', 'JPEG'... to a Pillow format name
    format_for_path: Pillow format name for a file extension
    png_compress_level: Map 0-100 quality onto a 0-9 zlib level
    decode: Encoded bytes -> Raster
    load_raster: File path -> Raster, checking the extension first
    encode: Raster -> encoded bytes
"""

import io
import logging
from pathlib import Path
from typing import Iterable, Union

from PIL import Image, UnidentifiedImageError

from IU_Libs.constants import (
    DECODABLE_FORMATS,
    DEFAULT_QUALITY,
    EXTENSION_TO_FORMAT,
    PNG_COMPRESS_MAX,
    QUALITY_MAX,
    QUALITY_MIN,
    SUPPORTED_EXTENSIONS,
)
from IU_Libs.errors import DecodeFailureError, UnsupportedFormatError
from IU_Libs.RasterLib.color_utils import clamp, round_half_away
from IU_Libs.RasterLib.raster import Raster

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def normalize_format(image_format: str) -> str:
    """
    Map an extension or format name to a Pillow format name.

    Args:
        image_format: 'jpg', '.jpeg', 'JPEG', 'png', 'gif'...

    Returns:
        'JPEG', 'PNG' or 'GIF'

    Raises:
        UnsupportedFormatError: For any other format
    """
    key = str(image_format).strip().lower()
    if not key.startswith("."):
        key = "." + key

    if key in EXTENSION_TO_FORMAT:
        return EXTENSION_TO_FORMAT[key]
    if key[1:].upper() in DECODABLE_FORMATS:
        return key[1:].upper()

    raise UnsupportedFormatError(f"Image type not allowed: {image_format}")


def format_for_path(path: PathLike) -> str:
    """Pillow format name for the extension of ``path``."""
    suffix = Path(path).suffix.lower()
    if suffix not in EXTENSION_TO_FORMAT:
        raise UnsupportedFormatError(f"Image type not allowed: {path}")
    return EXTENSION_TO_FORMAT[suffix]


def png_compress_level(quality: int) -> int:
    """0-100 quality to zlib level, inverted because 0 is the fastest level."""
    quality = clamp(int(quality), QUALITY_MIN, QUALITY_MAX)
    return PNG_COMPRESS_MAX - round_half_away(quality / 100.0 * PNG_COMPRESS_MAX)


def decode(data: bytes, allowed_formats: Iterable[str] = DECODABLE_FORMATS) -> Raster:
    """
    Decode image bytes into a Raster.

    Animated GIFs contribute their first frame.

    Args:
        data: Encoded image
        allowed_formats: Pillow format names to accept

    Returns:
        RGBA Raster

    Raises:
        UnsupportedFormatError: If the signature is unknown or not allowed
        DecodeFailureError: If the data is truncated or corrupt
    """
    allowed = {fmt.upper() for fmt in allowed_formats}

    try:
        image = Image.open(io.BytesIO(data))
    except UnidentifiedImageError as e:
        raise UnsupportedFormatError(f"Unrecognized image data: {e}") from e

    if image.format not in allowed:
        raise UnsupportedFormatError(
            f"Image type not allowed: {image.format}. Allowed: {', '.join(sorted(allowed))}"
        )

    try:
        image.seek(0)
        image.load()
        raster = Raster.from_image(image)
    except (OSError, SyntaxError, ValueError, EOFError) as e:
        raise DecodeFailureError(f"Failed to decode {image.format} image: {e}") from e

    logger.debug(f"Decoded {image.format} image {raster.width}x{raster.height}")
    return raster


def load_raster(path: PathLike, allowed_extensions: Iterable[str] = SUPPORTED_EXTENSIONS) -> Raster:
    """
    Load an image file into a Raster.

    Args:
        path: Image file path
        allowed_extensions: Lower-case extensions (with dot) to accept

    Returns:
        RGBA Raster

    Raises:
        UnsupportedFormatError: If the extension is not allowed
        DecodeFailureError: If the file is missing, unreadable or corrupt
    """
    path = Path(path)
    allowed_extensions = tuple(ext.lower() for ext in allowed_extensions)

    suffix = path.suffix.lower()
    if suffix not in allowed_extensions or suffix not in EXTENSION_TO_FORMAT:
        raise UnsupportedFormatError(
            f"Image type not allowed: {path.name}. Allowed: {', '.join(allowed_extensions)}"
        )

    if not path.is_file():
        raise DecodeFailureError(f"Image file not found: {path}")

    try:
        data = path.read_bytes()
    except OSError as e:
        raise DecodeFailureError(f"Failed to read image from {path}: {e}") from e

    formats = {EXTENSION_TO_FORMAT[ext] for ext in allowed_extensions if ext in EXTENSION_TO_FORMAT}
    try:
        return decode(data, formats)
    except UnsupportedFormatError as e:
        # Extension already checked, so unknown content counts as corrupt
        raise DecodeFailureError(f"Failed to load image from {path}: {e}") from e


def encode(raster: Raster, image_format: str, quality: int = DEFAULT_QUALITY) -> bytes:
    """
    Encode a Raster.

    Args:
        raster: Pixels to encode
        image_format: Extension or format name ('jpg', 'png', 'gif'...)
        quality: 0-100 (clamped). JPEG quality directly, PNG compression
                 level through png_compress_level, ignored for GIF

    Returns:
        Encoded bytes

    Raises:
        UnsupportedFormatError: If the format is not JPEG, PNG or GIF
        OSError: If Pillow fails to write the image
    """
    pil_format = normalize_format(image_format)
    quality = clamp(int(quality), QUALITY_MIN, QUALITY_MAX)

    image = raster.to_image()
    save_kwargs = {"format": pil_format}
    if pil_format == "JPEG":
        image = image.convert("RGB")
        save_kwargs["quality"] = quality
    elif pil_format == "PNG":
        save_kwargs["compress_level"] = png_compress_level(quality)

    buffer = io.BytesIO()
    try:
        image.save(buffer, **save_kwargs)
    except (OSError, ValueError) as e:
        raise OSError(f"Failed to encode image as {pil_format}: {e}") from e

    return buffer.getvalue()
