"""
Exception types raised by Image Util.

Every error derives from ImageUtilError and from the built-in exception a
caller would naturally catch for it, so ``except ValueError`` keeps working
for parameter problems and ``except IOError`` for unreadable files.
"""


class ImageUtilError(Exception):
    pass


class UnsupportedFormatError(ImageUtilError, ValueError):
    """Unknown file extension or image signature."""


class DecodeFailureError(ImageUtilError, IOError):
    """Image file missing, unreadable or corrupt."""


class InvalidParameterError(ImageUtilError, ValueError):
    """Parameter value that cannot be clamped into a usable range."""


class FilterUnavailableError(ImageUtilError, RuntimeError):
    """A color filter primitive is not available on this platform."""


class PipelineStateError(ImageUtilError, RuntimeError):
    """Operation requested on a pipeline that holds no image."""
