"""Load/save entry points.

Stateless free functions: resolve the format, dispatch to the codec adapter
and return a canonical :class:`Image` (or encoded bytes). File variants do a
single whole-file read or write; ``OSError`` from that I/O is not wrapped.
"""

from __future__ import annotations

import logging
from os import PathLike
from pathlib import Path
from typing import Callable, Mapping, Union

from galaxy_image.errors import UnsupportedFormatError
from galaxy_image.formats.image_format import (
    ImageFormat,
    detect_format,
    detect_from_bytes,
    parse_image_format,
)
from galaxy_image.image import Image
from galaxy_image.io.bmp import decode_bmp, encode_bmp
from galaxy_image.io.exr import decode_exr, encode_exr
from galaxy_image.io.jpeg import decode_jpeg, encode_jpeg
from galaxy_image.io.png import decode_png, encode_png
from galaxy_image.utils.param_check import clamp_quality

logger = logging.getLogger(__name__)

PathInput = Union[str, PathLike]
BytesInput = Union[bytes, bytearray, memoryview]

DEFAULT_JPEG_QUALITY = 90

_DECODERS: Mapping[ImageFormat, Callable[[bytes], Image]] = {
    ImageFormat.PNG: decode_png,
    ImageFormat.BMP: decode_bmp,
    ImageFormat.JPEG: decode_jpeg,
    ImageFormat.EXR: decode_exr,
}

_ENCODERS: Mapping[ImageFormat, Callable[[Image, int], bytes]] = {
    ImageFormat.PNG: lambda image, _quality: encode_png(image),
    ImageFormat.BMP: lambda image, _quality: encode_bmp(image),
    ImageFormat.JPEG: encode_jpeg,
    ImageFormat.EXR: lambda image, _quality: encode_exr(image),
}


def _resolve(image_format: str | ImageFormat) -> ImageFormat:
    if isinstance(image_format, ImageFormat):
        return image_format
    try:
        return parse_image_format(image_format)
    except ValueError as exc:
        raise UnsupportedFormatError(str(exc)) from exc


def load_from_bytes(data: BytesInput, image_format: str | ImageFormat) -> Image:
    """Decode `data` with an explicitly chosen format (no detection)."""

    fmt = _resolve(image_format)
    decoder = _DECODERS.get(fmt)
    if decoder is None:
        raise UnsupportedFormatError("Unsupported format: Unknown format")
    logger.debug("Decoding %d bytes as %s", len(data), fmt.name)
    return decoder(bytes(data))


def load_from_bytes_auto(data: BytesInput) -> Image:
    """Decode `data`, detecting the format from magic bytes only."""

    return load_from_bytes(data, detect_from_bytes(data))


def load_from_file(path: PathInput) -> Image:
    """Read a whole file and decode it.

    Magic bytes decide the format; the file extension is only a fallback.
    """

    data = Path(path).read_bytes()
    fmt = detect_format(data, path)
    logger.debug("Detected %s for %s", fmt.name, path)
    return load_from_bytes(data, fmt)


def save_to_bytes(
    image: Image,
    image_format: str | ImageFormat,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> bytes:
    """Encode `image`. `quality` only affects JPEG and is clamped to ``[1, 100]``."""

    fmt = _resolve(image_format)
    encoder = _ENCODERS.get(fmt)
    if encoder is None:
        raise UnsupportedFormatError("Unsupported format: Unknown format")

    clamped = DEFAULT_JPEG_QUALITY
    if fmt is ImageFormat.JPEG:
        clamped = clamp_quality(quality)
        if clamped != quality:
            logger.warning("JPEG quality %s clamped to %d", quality, clamped)
    logger.debug("Encoding %r as %s", image, fmt.name)
    return encoder(image, clamped)


def save_to_file_with_quality(
    image: Image,
    path: PathInput,
    image_format: str | ImageFormat,
    quality: int,
) -> None:
    """Encode then write the whole file; nothing is written if encoding fails."""

    data = save_to_bytes(image, image_format, quality)
    Path(path).write_bytes(data)
    logger.debug("Wrote %d bytes to %s", len(data), path)


def save_to_file(image: Image, path: PathInput, image_format: str | ImageFormat) -> None:
    save_to_file_with_quality(image, path, image_format, DEFAULT_JPEG_QUALITY)
