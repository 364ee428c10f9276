"""Exception types raised by galaxy_image.

Value-style failures also derive from :class:`ValueError` so callers that only
catch built-in errors keep working. File-system failures are never wrapped:
``OSError`` from the file entry points propagates unchanged.
"""

from __future__ import annotations

from typing import Optional


class ImageError(Exception):
    """Base class for every error raised by this package."""


class UnsupportedFormatError(ImageError, ValueError):
    """A format, layout or component type falls outside what a codec can represent."""


class InvalidPixelFormatError(ImageError, ValueError):
    """An array or buffer does not match the declared pixel layout."""


class InvalidDimensionsError(ImageError, ValueError):
    def __init__(self, width: int, height: int, reason: str = "") -> None:
        self.width = width
        self.height = height
        message = f"Invalid dimensions: {width}x{height}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class EmptyDataError(ImageError, ValueError):
    """The source holds no usable pixel data (e.g. an EXR layer without channels)."""


class _CodecError(ImageError):
    action = "processing"

    def __init__(self, image_format: str, message: str, *, cause: Optional[BaseException] = None) -> None:
        self.image_format = str(image_format)
        self.cause = cause
        text = f"{self.image_format.upper()} {self.action} error: {message}"
        if cause is not None and str(cause) and str(cause) not in message:
            text += f" ({cause})"
        super().__init__(text)


class DecodeError(_CodecError):
    """The underlying codec rejected the bitstream."""

    action = "decoding"


class EncodeError(_CodecError):
    """The underlying codec failed to produce output."""

    action = "encoding"
