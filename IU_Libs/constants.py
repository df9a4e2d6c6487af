"""
Constants and configuration values for Image Util.

This module centralizes all constant values, magic numbers, and
default parameters used throughout the library.
"""

# Pixel format
CHANNELS = 4
OPAQUE = 255
TRANSPARENT_COLOR = (255, 255, 255, 0)
WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)

# Supported file formats
SUPPORTED_EXTENSIONS = (".jpg", ".jpeg", ".gif", ".png")
MASK_EXTENSIONS = (".png",)
EXTENSION_TO_FORMAT = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".gif": "GIF",
    ".png": "PNG",
}
DECODABLE_FORMATS = ("JPEG", "PNG", "GIF")

# Resize
DEFAULT_RESIZE_POLICY = "auto"

# Sharpening (final width is rescaled to a 750px reference before the fit)
SHARPEN_REFERENCE_WIDTH = 750.0
SHARPEN_COEFF_A = 52
SHARPEN_COEFF_B = -0.27810650887573124
SHARPEN_COEFF_C = 0.00047337278106508946
SHARPEN_CENTER_BIAS = 12

# Rotation
ANGLE_LIMIT = 360
RANDOM_ANGLE_RANGE = (-6, 6)
DEFAULT_ROTATE_BACKGROUND = "ffffff"
ALPHA_BACKGROUND = "alpha"

# Color filters
DEFAULT_BLUR_KIND = "gaussian"
DEFAULT_BRIGHTNESS = -20
DEFAULT_CONTRAST = -10
BRIGHTNESS_LIMIT = 255
CONTRAST_LIMIT = 255
DEFAULT_SMOOTH = 6
SMOOTH_LIMIT = 12
DEFAULT_SEPIA_RGB = "90, 55, 30"
DEFAULT_SEPIA_BRIGHTNESS = -30

# Artistic filters
DEFAULT_PIXELATE_BLOCK = 10
DEFAULT_RASTERBATE_BLOCK = 6
DEFAULT_SCATTER_INTENSITY = 4
DEFAULT_NOISE_INTENSITY = 30
NOISE_LIMIT = 255

# Compositing
DEFAULT_WATERMARK_TRANSPARENCY = 40
DEFAULT_WATERMARK_PADDING = 2
DEFAULT_WATERMARK_CORNER = "BR"
WATERMARK_CORNERS = ("TL", "TR", "BL", "BR")
PERCENT_MAX = 100

# Output
DEFAULT_QUALITY = 80
QUALITY_MIN = 0
QUALITY_MAX = 100
PNG_COMPRESS_MAX = 9
DEFAULT_CHMOD = 0o644
TMP_SUFFIX = "_tmp"

# Recipe field names
FIELD_OP = "op"
FIELD_STEPS = "steps"
