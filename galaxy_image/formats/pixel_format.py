from __future__ import annotations

from enum import Enum
from typing import Optional


class PixelFormat(str, Enum):
    """Channel layout of an interleaved pixel.

    BGR/BGRA are the byte-level transposition of RGB/RGBA: converting between
    the two is a swap of channels 0 and 2, never a different memory layout.
    """

    R = "r"
    RG = "rg"
    RGB = "rgb"
    RGBA = "rgba"
    BGR = "bgr"
    BGRA = "bgra"

    @property
    def channel_count(self) -> int:
        return _CHANNEL_COUNT[self]

    @property
    def has_alpha(self) -> bool:
        return self in _WITH_ALPHA

    @property
    def is_bgr(self) -> bool:
        return self in (PixelFormat.BGR, PixelFormat.BGRA)

    @property
    def swapped(self) -> Optional["PixelFormat"]:
        """Blue/red swapped counterpart, or ``None`` for R and RG."""
        return _SWAPPED.get(self)


_CHANNEL_COUNT = {
    PixelFormat.R: 1,
    PixelFormat.RG: 2,
    PixelFormat.RGB: 3,
    PixelFormat.RGBA: 4,
    PixelFormat.BGR: 3,
    PixelFormat.BGRA: 4,
}

# RG is luminance + alpha.
_WITH_ALPHA = frozenset({PixelFormat.RG, PixelFormat.RGBA, PixelFormat.BGRA})

_SWAPPED = {
    PixelFormat.RGB: PixelFormat.BGR,
    PixelFormat.BGR: PixelFormat.RGB,
    PixelFormat.RGBA: PixelFormat.BGRA,
    PixelFormat.BGRA: PixelFormat.RGBA,
}


def parse_pixel_format(raw: str | PixelFormat) -> PixelFormat:
    if isinstance(raw, PixelFormat):
        return raw
    try:
        return PixelFormat(str(raw).lower())
    except ValueError as exc:
        raise ValueError(f"Unknown pixel format: {raw!r}") from exc
