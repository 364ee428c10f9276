"""Codec adapters between :class:`~galaxy_image.image.Image` and on-disk encodings."""

from __future__ import annotations

from .bmp import decode_bmp, encode_bmp
from .capabilities import ENCODE_CAPABILITIES, CodecCapabilities, LayoutRule, reduce_for_encode
from .exr import decode_exr, encode_exr
from .jpeg import decode_jpeg, encode_jpeg
from .png import decode_png, encode_png

__all__ = [
    "ENCODE_CAPABILITIES",
    "CodecCapabilities",
    "LayoutRule",
    "decode_bmp",
    "decode_exr",
    "decode_jpeg",
    "decode_png",
    "encode_bmp",
    "encode_exr",
    "encode_jpeg",
    "encode_png",
    "reduce_for_encode",
]
