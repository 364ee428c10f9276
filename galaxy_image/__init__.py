"""galaxy_image - in-memory raster container and PNG/BMP/JPEG/EXR conversion.

Pixel data lives in one canonical form (:class:`Image`: flat little-endian
buffer + :class:`PixelFormat` + :class:`ComponentType`). Codec adapters map
that form to and from each file format. The codec bindings (pypng, OpenCV,
Pillow, OpenEXR) are only imported when a format that needs them is used.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

from .errors import (
    DecodeError,
    EmptyDataError,
    EncodeError,
    ImageError,
    InvalidDimensionsError,
    InvalidPixelFormatError,
    UnsupportedFormatError,
)
from .formats import (
    ComponentType,
    ImageFormat,
    PixelFormat,
    detect_format,
    detect_from_bytes,
    detect_from_extension,
)
from .image import Image

__version__ = "0.1.0"

__all__ = [
    "ComponentType",
    "DecodeError",
    "EmptyDataError",
    "EncodeError",
    "Image",
    "ImageError",
    "ImageFormat",
    "InvalidDimensionsError",
    "InvalidPixelFormatError",
    "PixelFormat",
    "UnsupportedFormatError",
    "detect_format",
    "detect_from_bytes",
    "detect_from_extension",
    # Facade
    "DEFAULT_JPEG_QUALITY",
    "load_from_bytes",
    "load_from_bytes_auto",
    "load_from_file",
    "save_to_bytes",
    "save_to_file",
    "save_to_file_with_quality",
]

_LAZY_EXPORTS = {
    "DEFAULT_JPEG_QUALITY": ("api", "DEFAULT_JPEG_QUALITY"),
    "load_from_bytes": ("api", "load_from_bytes"),
    "load_from_bytes_auto": ("api", "load_from_bytes_auto"),
    "load_from_file": ("api", "load_from_file"),
    "save_to_bytes": ("api", "save_to_bytes"),
    "save_to_file": ("api", "save_to_file"),
    "save_to_file_with_quality": ("api", "save_to_file_with_quality"),
}


def __getattr__(name: str) -> Any:  # pragma: no cover - thin delegation
    target = _LAZY_EXPORTS.get(name)
    if target is not None:
        module_name, attr = target
        module = import_module(f"{__name__}.{module_name}")
        value = getattr(module, attr)
        globals()[name] = value
        return value

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
