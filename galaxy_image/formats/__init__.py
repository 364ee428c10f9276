"""Value types describing pixel layouts, sample kinds and file encodings."""

from __future__ import annotations

from .component_type import ComponentType, component_type_for_dtype, parse_component_type
from .image_format import (
    ImageFormat,
    detect_format,
    detect_from_bytes,
    detect_from_extension,
    parse_image_format,
)
from .pixel_format import PixelFormat, parse_pixel_format

__all__ = [
    "ComponentType",
    "ImageFormat",
    "PixelFormat",
    "component_type_for_dtype",
    "detect_format",
    "detect_from_bytes",
    "detect_from_extension",
    "parse_component_type",
    "parse_image_format",
    "parse_pixel_format",
]
