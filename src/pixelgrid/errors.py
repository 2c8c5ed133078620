"""
Error types raised by the pixel art pipeline.
"""


class PixelGridError(Exception):
    """Base exception for pixelgrid errors."""

    pass


class InvalidOptionsError(PixelGridError, ValueError):
    """Raised when conversion or export options are degenerate."""

    pass


class BitmapDecodeError(PixelGridError):
    """Raised when a source bitmap is missing, unreadable or malformed."""

    pass
