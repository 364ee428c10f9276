"""Per-codec conversion matrix.

Every (target format, pixel format) pair maps to a :class:`LayoutRule` that
names the layout handed to the codec and, for each output channel, which
source channel feeds it. Dropping alpha, replicating grey and undoing BGR
order are therefore all the same operation: a channel gather. Anything not
listed in the table is rejected; there is no best-effort fallback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

import numpy as np

from galaxy_image.errors import InvalidDimensionsError, UnsupportedFormatError
from galaxy_image.formats.component_type import ComponentType
from galaxy_image.formats.image_format import ImageFormat
from galaxy_image.formats.pixel_format import PixelFormat
from galaxy_image.image import Image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutRule:
    target: PixelFormat
    source_channels: tuple[int, ...]
    channel_names: Optional[tuple[str, ...]] = None
    lossy: bool = False


@dataclass(frozen=True)
class CodecCapabilities:
    component_types: frozenset[ComponentType]
    layouts: Mapping[PixelFormat, LayoutRule] = field(default_factory=dict)
    max_dimension: Optional[int] = None


_U8 = frozenset({ComponentType.U8})
_INTEGER = frozenset({ComponentType.U8, ComponentType.U16})
_FLOAT = frozenset({ComponentType.F16, ComponentType.F32})

ENCODE_CAPABILITIES: Mapping[ImageFormat, CodecCapabilities] = {
    ImageFormat.PNG: CodecCapabilities(
        component_types=_INTEGER,
        layouts={
            PixelFormat.R: LayoutRule(PixelFormat.R, (0,)),
            PixelFormat.RG: LayoutRule(PixelFormat.RG, (0, 1)),
            PixelFormat.RGB: LayoutRule(PixelFormat.RGB, (0, 1, 2)),
            PixelFormat.RGBA: LayoutRule(PixelFormat.RGBA, (0, 1, 2, 3)),
            PixelFormat.BGR: LayoutRule(PixelFormat.RGB, (2, 1, 0)),
            PixelFormat.BGRA: LayoutRule(PixelFormat.RGBA, (2, 1, 0, 3)),
        },
    ),
    ImageFormat.BMP: CodecCapabilities(
        component_types=_U8,
        layouts={
            PixelFormat.R: LayoutRule(PixelFormat.RGB, (0, 0, 0)),
            PixelFormat.RG: LayoutRule(PixelFormat.RGB, (0, 0, 0), lossy=True),
            PixelFormat.RGB: LayoutRule(PixelFormat.RGB, (0, 1, 2)),
            PixelFormat.RGBA: LayoutRule(PixelFormat.RGB, (0, 1, 2), lossy=True),
            PixelFormat.BGR: LayoutRule(PixelFormat.RGB, (2, 1, 0)),
            PixelFormat.BGRA: LayoutRule(PixelFormat.RGB, (2, 1, 0), lossy=True),
        },
    ),
    ImageFormat.JPEG: CodecCapabilities(
        component_types=_U8,
        layouts={
            PixelFormat.R: LayoutRule(PixelFormat.R, (0,)),
            PixelFormat.RG: LayoutRule(PixelFormat.R, (0,), lossy=True),
            PixelFormat.RGB: LayoutRule(PixelFormat.RGB, (0, 1, 2)),
            PixelFormat.RGBA: LayoutRule(PixelFormat.RGB, (0, 1, 2), lossy=True),
            PixelFormat.BGR: LayoutRule(PixelFormat.RGB, (2, 1, 0)),
            PixelFormat.BGRA: LayoutRule(PixelFormat.RGB, (2, 1, 0), lossy=True),
        },
        max_dimension=65535,
    ),
    # EXR keeps every channel; BGR sources are re-mapped by picking the
    # source index per channel name.
    ImageFormat.EXR: CodecCapabilities(
        component_types=_FLOAT,
        layouts={
            PixelFormat.R: LayoutRule(PixelFormat.R, (0,), ("Y",)),
            PixelFormat.RG: LayoutRule(PixelFormat.RG, (0, 1), ("Y", "A")),
            PixelFormat.RGB: LayoutRule(PixelFormat.RGB, (0, 1, 2), ("R", "G", "B")),
            PixelFormat.RGBA: LayoutRule(PixelFormat.RGBA, (0, 1, 2, 3), ("R", "G", "B", "A")),
            PixelFormat.BGR: LayoutRule(PixelFormat.RGB, (2, 1, 0), ("R", "G", "B")),
            PixelFormat.BGRA: LayoutRule(PixelFormat.RGBA, (2, 1, 0, 3), ("R", "G", "B", "A")),
        },
    ),
}


def get_capabilities(image_format: ImageFormat) -> CodecCapabilities:
    caps = ENCODE_CAPABILITIES.get(image_format)
    if caps is None:
        raise UnsupportedFormatError(f"Unsupported format: {image_format.value}")
    return caps


def resolve_layout(image: Image, image_format: ImageFormat) -> LayoutRule:
    """Check `image` against the table and return the rule used to encode it."""

    caps = get_capabilities(image_format)
    name = image_format.name

    if image.component_type not in caps.component_types:
        supported = ", ".join(sorted(ct.name for ct in caps.component_types))
        raise UnsupportedFormatError(
            f"{name} does not support {image.component_type.name} component type, use {supported}"
        )

    rule = caps.layouts.get(image.pixel_format)
    if rule is None:
        raise UnsupportedFormatError(f"{name} does not support {image.pixel_format.name} pixel format")

    if image.width == 0 or image.height == 0:
        raise InvalidDimensionsError(image.width, image.height, f"{name} cannot store an empty image")
    if caps.max_dimension is not None and max(image.width, image.height) > caps.max_dimension:
        raise InvalidDimensionsError(
            image.width, image.height, f"{name} sides are limited to {caps.max_dimension} pixels"
        )

    if rule.lossy:
        logger.warning(
            "%s cannot store %s; reducing to %s (channels %s)",
            name,
            image.pixel_format.name,
            rule.target.name,
            list(rule.source_channels),
        )
    return rule


def gather_channels(image: Image, source_channels: tuple[int, ...]) -> np.ndarray:
    """Return a contiguous ``(H, W, len(source_channels))`` array."""

    pixels = image.to_array()
    return np.ascontiguousarray(pixels[..., list(source_channels)])


def reduce_for_encode(image: Image, image_format: ImageFormat) -> tuple[np.ndarray, PixelFormat]:
    """Apply the table rule for `image_format` to `image`.

    Returns the gathered pixels (canonical RGB/RGBA/R/RG order, native-endian
    copy of the samples) together with the layout they are in.
    """

    rule = resolve_layout(image, image_format)
    pixels = gather_channels(image, rule.source_channels)
    logger.debug(
        "%s encode: %s/%s -> %s",
        image_format.name,
        image.pixel_format.name,
        image.component_type.name,
        rule.target.name,
    )
    return pixels.astype(pixels.dtype.newbyteorder("="), copy=False), rule.target
