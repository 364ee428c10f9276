"""OpenEXR adapter.

EXR stores each channel as its own flat sample array, keyed by name, while an
:class:`Image` is interleaved. Decoding picks a channel set by name (see
``CHANNEL_PATTERNS``), unifies the sample kinds to one component type and
interleaves. Encoding strides through the interleaved buffer once per output
channel and hands the writer a name-sorted channel list.

The OpenEXR binding reads and writes paths, so the byte-level entry points
go through a private temporary directory.
"""

from __future__ import annotations

import logging
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Sequence

import numpy as np

from galaxy_image.errors import (
    DecodeError,
    EmptyDataError,
    EncodeError,
    InvalidDimensionsError,
    UnsupportedFormatError,
)
from galaxy_image.formats.component_type import ComponentType
from galaxy_image.formats.image_format import ImageFormat
from galaxy_image.formats.pixel_format import PixelFormat
from galaxy_image.image import Image
from galaxy_image.io.capabilities import resolve_layout
from galaxy_image.utils.optional_deps import require

logger = logging.getLogger(__name__)


class SampleKind(str, Enum):
    """Native EXR sample storage."""

    UINT = "uint"
    HALF = "half"
    FLOAT = "float"


_NATIVE_DTYPES = {
    SampleKind.UINT: np.dtype(np.uint32),
    SampleKind.HALF: np.dtype(np.float16),
    SampleKind.FLOAT: np.dtype(np.float32),
}

_KIND_COMPONENTS = {
    SampleKind.HALF: ComponentType.F16,
    SampleKind.FLOAT: ComponentType.F32,
}

_COMPONENT_KINDS = {component: kind for kind, component in _KIND_COMPONENTS.items()}


@dataclass(frozen=True)
class ChannelPattern:
    required: tuple[str, ...]
    excluded: tuple[str, ...]
    pixel_format: PixelFormat

    def matches(self, present: frozenset[str]) -> bool:
        return all(name in present for name in self.required) and not any(
            name in present for name in self.excluded
        )


# Evaluated top to bottom; `required` doubles as the interleave order.
CHANNEL_PATTERNS: tuple[ChannelPattern, ...] = (
    ChannelPattern(("R", "G", "B", "A"), (), PixelFormat.RGBA),
    ChannelPattern(("R", "G", "B"), ("A",), PixelFormat.RGB),
    ChannelPattern(("Y", "A"), (), PixelFormat.RG),
    ChannelPattern(("Y",), ("A",), PixelFormat.R),
    ChannelPattern(("R", "A"), (), PixelFormat.RG),
    ChannelPattern(("R",), ("A",), PixelFormat.R),
)


def select_channels(names: Iterable[str]) -> tuple[PixelFormat, tuple[str, ...]]:
    """Pick the layout and channel order for a set of EXR channel names."""

    present = frozenset(str(name) for name in names)
    if not present:
        raise EmptyDataError("EXR file contains no channels")
    for pattern in CHANNEL_PATTERNS:
        if pattern.matches(present):
            return pattern.pixel_format, pattern.required
    raise UnsupportedFormatError(
        f"No recognized channels (R/G/B/A/Y) in EXR file, found {sorted(present)}"
    )


def unify_component_type(kinds: Sequence[SampleKind | str]) -> tuple[ComponentType, bool]:
    """Choose one component type for the selected channels.

    Returns ``(component_type, widened)``. A uniform HALF or FLOAT set is kept
    as-is; UINT has no canonical counterpart and mixed sets cannot share one,
    so both become F32 (``widened`` is then True).
    """

    unified = [SampleKind(kind) for kind in kinds]
    if not unified:
        raise EmptyDataError("EXR file contains no channels")
    first = unified[0]
    if all(kind is first for kind in unified) and first in _KIND_COMPONENTS:
        return _KIND_COMPONENTS[first], False
    return ComponentType.F32, True


def interleave_channels(
    samples: Sequence[np.ndarray],
    width: int,
    height: int,
    component_type: ComponentType,
) -> np.ndarray:
    """Interleave flat per-channel samples into an ``(H, W, C)`` array.

    Each sample array is cast to `component_type` first: HALF widens to FLOAT
    exactly, UINT is converted numerically (large values may lose precision).
    """

    pixel_count = int(width) * int(height)
    out = np.empty((pixel_count, len(samples)), dtype=component_type.dtype)
    for index, flat in enumerate(samples):
        flat = np.asarray(flat).reshape(-1)
        if flat.size != pixel_count:
            raise InvalidDimensionsError(
                width, height, f"channel {index} holds {flat.size} samples, expected {pixel_count}"
            )
        out[:, index] = flat.astype(component_type.dtype, copy=False)
    return out.reshape(int(height), int(width), len(samples))


def deinterleave_channels(image: Image) -> dict[str, np.ndarray]:
    """Split `image` into flat, name-sorted EXR channels.

    Every channel is a strided read of the interleaved buffer starting at its
    source component's byte offset. BGR sources only change which offset
    feeds each name. The result is ordered by name, as the file format
    requires.
    """

    rule = resolve_layout(image, ImageFormat.EXR)
    dtype = image.component_type.dtype
    native = _NATIVE_DTYPES[_COMPONENT_KINDS[image.component_type]]

    channels = {}
    for name, source in zip(rule.channel_names, rule.source_channels):
        strided = np.ndarray(
            shape=(image.pixel_count,),
            dtype=dtype,
            buffer=image.data,
            offset=source * image.component_type.byte_width,
            strides=(image.bytes_per_pixel,),
        )
        channels[name] = strided.astype(native)
    return dict(sorted(channels.items()))


def _bindings() -> tuple[Any, Any]:
    OpenEXR = require("OpenEXR", purpose="EXR support")
    Imath = require("Imath", purpose="EXR support")
    return OpenEXR, Imath


@contextmanager
def _scratch_path() -> Iterator[Path]:
    with tempfile.TemporaryDirectory(prefix="galaxy_image_exr_") as tmp:
        yield Path(tmp) / "image.exr"


def _sample_kind(pixel_type: Any, Imath: Any) -> SampleKind:
    value = getattr(pixel_type, "v", pixel_type)
    if value == Imath.PixelType.HALF:
        return SampleKind.HALF
    if value == Imath.PixelType.FLOAT:
        return SampleKind.FLOAT
    if value == Imath.PixelType.UINT:
        return SampleKind.UINT
    raise UnsupportedFormatError(f"Unknown EXR sample type: {pixel_type!r}")


def _reject_deep(header: Mapping[str, Any]) -> None:
    part_type = header.get("type", b"")
    if isinstance(part_type, bytes):
        part_type = part_type.decode("ascii", "replace")
    if "deep" in str(part_type):
        raise UnsupportedFormatError("EXR deep data not supported")


def _reject_subsampled(channels: Mapping[str, Any], names: Sequence[str]) -> None:
    for name in names:
        channel = channels[name]
        if getattr(channel, "xSampling", 1) != 1 or getattr(channel, "ySampling", 1) != 1:
            raise UnsupportedFormatError(f"EXR channel {name!r} is sub-sampled")


def decode_exr(data: bytes) -> Image:
    """Decode the first part of an EXR file at its full resolution."""

    OpenEXR, Imath = _bindings()
    with _scratch_path() as path:
        path.write_bytes(bytes(data))
        try:
            exr = OpenEXR.InputFile(str(path))
        except (OSError, RuntimeError) as exc:
            raise DecodeError(ImageFormat.EXR.value, "cannot open bitstream", cause=exc) from exc
        try:
            header = exr.header()
            window = header["dataWindow"]
            width = int(window.max.x - window.min.x + 1)
            height = int(window.max.y - window.min.y + 1)
            _reject_deep(header)
            channels = dict(header.get("channels") or {})

            pixel_format, names = select_channels(channels)
            _reject_subsampled(channels, names)
            kinds = [_sample_kind(channels[name].type, Imath) for name in names]
            component_type, widened = unify_component_type(kinds)

            samples = [
                np.frombuffer(exr.channel(name, channels[name].type), dtype=_NATIVE_DTYPES[kind])
                for name, kind in zip(names, kinds)
            ]
        except (OSError, RuntimeError) as exc:
            raise DecodeError(ImageFormat.EXR.value, "cannot read channels", cause=exc) from exc
        finally:
            exr.close()

    if widened:
        logger.debug("EXR samples %s converted to F32", [kind.value for kind in kinds])
    pixels = interleave_channels(samples, width, height, component_type)
    logger.debug(
        "EXR decoded %dx%d channels=%s -> %s/%s",
        width,
        height,
        list(names),
        pixel_format.name,
        component_type.name,
    )
    return Image.from_array(pixels, pixel_format)


def encode_exr(image: Image) -> bytes:
    """Encode as a single-part scanline EXR with RLE compression."""

    channels = deinterleave_channels(image)
    OpenEXR, Imath = _bindings()
    kind = _COMPONENT_KINDS[image.component_type]
    pixel_type = Imath.PixelType(Imath.PixelType.HALF if kind is SampleKind.HALF else Imath.PixelType.FLOAT)

    header = OpenEXR.Header(image.width, image.height)
    header["channels"] = {name: Imath.Channel(pixel_type) for name in channels}
    header["compression"] = Imath.Compression(Imath.Compression.RLE_COMPRESSION)

    with _scratch_path() as path:
        try:
            exr = OpenEXR.OutputFile(str(path), header)
            try:
                exr.writePixels({name: samples.tobytes() for name, samples in channels.items()})
            finally:
                exr.close()
        except (OSError, RuntimeError, TypeError) as exc:
            raise EncodeError(ImageFormat.EXR.value, "writer rejected image", cause=exc) from exc
        return path.read_bytes()
