from __future__ import annotations

from enum import Enum
from os import PathLike
from typing import Optional, Union


class ImageFormat(str, Enum):
    """On-disk encodings understood by galaxy_image."""

    PNG = "png"
    BMP = "bmp"
    JPEG = "jpeg"
    EXR = "exr"
    UNKNOWN = "unknown"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]


_EXTENSIONS = {
    ImageFormat.PNG: "png",
    ImageFormat.BMP: "bmp",
    ImageFormat.JPEG: "jpg",
    ImageFormat.EXR: "exr",
    ImageFormat.UNKNOWN: "",
}

# Checked in order; the first matching prefix wins.
_SIGNATURES: tuple[tuple[ImageFormat, bytes], ...] = (
    (ImageFormat.PNG, b"\x89PNG\r\n\x1a\n"),
    (ImageFormat.BMP, b"BM"),
    (ImageFormat.JPEG, b"\xff\xd8"),
    (ImageFormat.EXR, b"v/1\x01"),
)

# Detection needs the full PNG signature to be available, even for the
# shorter prefixes.
MIN_DETECT_LENGTH = max(len(signature) for _, signature in _SIGNATURES)

_SUFFIXES: tuple[tuple[str, ImageFormat], ...] = (
    (".png", ImageFormat.PNG),
    (".bmp", ImageFormat.BMP),
    (".jpg", ImageFormat.JPEG),
    (".jpeg", ImageFormat.JPEG),
    (".exr", ImageFormat.EXR),
)

_NAMES = {
    "png": ImageFormat.PNG,
    "bmp": ImageFormat.BMP,
    "jpg": ImageFormat.JPEG,
    "jpeg": ImageFormat.JPEG,
    "exr": ImageFormat.EXR,
}


def parse_image_format(raw: str | ImageFormat) -> ImageFormat:
    if isinstance(raw, ImageFormat):
        return raw
    key = str(raw).strip().lower().lstrip(".")
    try:
        return _NAMES[key]
    except KeyError as exc:
        raise ValueError(
            f"Unknown image format: {raw!r}. Choose from: png, bmp, jpg/jpeg, exr."
        ) from exc


def detect_from_bytes(data: bytes | bytearray | memoryview) -> ImageFormat:
    """Classify a buffer by its magic bytes.

    Buffers shorter than ``MIN_DETECT_LENGTH`` are always ``UNKNOWN``.
    """

    head = bytes(data[:MIN_DETECT_LENGTH])
    if len(head) < MIN_DETECT_LENGTH:
        return ImageFormat.UNKNOWN
    for image_format, signature in _SIGNATURES:
        if head.startswith(signature):
            return image_format
    return ImageFormat.UNKNOWN


def detect_from_extension(path: Union[str, PathLike]) -> ImageFormat:
    """Classify a path by its (case-insensitive) suffix."""

    name = str(path).lower()
    for suffix, image_format in _SUFFIXES:
        if name.endswith(suffix):
            return image_format
    return ImageFormat.UNKNOWN


def detect_format(
    data: bytes | bytearray | memoryview,
    path: Optional[Union[str, PathLike]] = None,
) -> ImageFormat:
    """Magic bytes first; the extension is consulted only when they say nothing."""

    image_format = detect_from_bytes(data)
    if image_format is ImageFormat.UNKNOWN and path is not None:
        image_format = detect_from_extension(path)
    return image_format
