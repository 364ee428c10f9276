from __future__ import annotations

from typing import Any, Union

import numpy as np

from galaxy_image.errors import InvalidDimensionsError, InvalidPixelFormatError
from galaxy_image.formats.component_type import (
    ComponentType,
    component_type_for_dtype,
    parse_component_type,
)
from galaxy_image.formats.pixel_format import PixelFormat, parse_pixel_format
from galaxy_image.utils.param_check import check_dimension

BytesLike = Union[bytes, bytearray, memoryview]


def expected_size(
    width: int,
    height: int,
    pixel_format: PixelFormat,
    component_type: ComponentType,
) -> int:
    """Byte length an image buffer must have for the given layout."""

    return int(width) * int(height) * pixel_format.channel_count * component_type.byte_width


class Image:
    """Interleaved raster held in a flat, exclusively owned byte buffer.

    The buffer length always equals
    ``width * height * channel_count * byte_width``. Multi-byte samples are
    little-endian. The image carries no knowledge of the file format it came
    from.
    """

    __slots__ = ("_data", "_width", "_height", "_pixel_format", "_component_type")

    def __init__(
        self,
        data: BytesLike,
        width: int,
        height: int,
        pixel_format: str | PixelFormat,
        component_type: str | ComponentType,
    ) -> None:
        width = _check_dimension(width, height, "width")
        height = _check_dimension(height, width, "height")
        pixel_format = parse_pixel_format(pixel_format)
        component_type = parse_component_type(component_type)

        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"data must be bytes-like, got {type(data).__name__}")
        buffer = bytearray(data)
        expected = expected_size(width, height, pixel_format, component_type)
        if len(buffer) != expected:
            raise InvalidDimensionsError(
                width,
                height,
                f"{pixel_format.name}/{component_type.name} needs {expected} bytes, got {len(buffer)}",
            )

        self._data = buffer
        self._width = width
        self._height = height
        self._pixel_format = pixel_format
        self._component_type = component_type

    # -- construction -----------------------------------------------------

    @classmethod
    def allocate(
        cls,
        width: int,
        height: int,
        pixel_format: str | PixelFormat,
        component_type: str | ComponentType,
    ) -> "Image":
        """Create a zero-filled image of the given layout."""

        width = _check_dimension(width, height, "width")
        height = _check_dimension(height, width, "height")
        pixel_format = parse_pixel_format(pixel_format)
        component_type = parse_component_type(component_type)
        size = expected_size(width, height, pixel_format, component_type)
        return cls(bytes(size), width, height, pixel_format, component_type)

    @classmethod
    def from_raw(
        cls,
        data: BytesLike,
        width: int,
        height: int,
        pixel_format: str | PixelFormat,
        component_type: str | ComponentType,
    ) -> "Image":
        """Wrap externally produced bytes.

        The bytes are copied and the size invariant is checked; a mismatch
        raises :class:`InvalidDimensionsError`.
        """

        return cls(data, width, height, pixel_format, component_type)

    @classmethod
    def from_array(cls, array: Any, pixel_format: str | PixelFormat) -> "Image":
        """Build an image from an ``(H, W)`` or ``(H, W, C)`` numpy array.

        The component type follows the dtype (uint8, uint16, float16, float32);
        samples are re-encoded little-endian.
        """

        pixel_format = parse_pixel_format(pixel_format)
        arr = np.asarray(array)
        if arr.ndim == 2:
            arr = arr[:, :, None]
        if arr.ndim != 3:
            raise InvalidPixelFormatError(f"Expected shape (H,W) or (H,W,C), got {arr.shape}")
        if arr.shape[2] != pixel_format.channel_count:
            raise InvalidPixelFormatError(
                f"{pixel_format.name} needs {pixel_format.channel_count} channels, got {arr.shape[2]}"
            )
        try:
            component_type = component_type_for_dtype(arr.dtype)
        except ValueError as exc:
            raise InvalidPixelFormatError(str(exc)) from exc

        height, width = int(arr.shape[0]), int(arr.shape[1])
        data = np.ascontiguousarray(arr, dtype=component_type.dtype).tobytes()
        return cls(data, width, height, pixel_format, component_type)

    # -- accessors --------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def pixel_format(self) -> PixelFormat:
        return self._pixel_format

    @property
    def component_type(self) -> ComponentType:
        return self._component_type

    @property
    def data(self) -> memoryview:
        """Writable, fixed-length view of the pixel bytes."""
        return memoryview(self._data)

    def tobytes(self) -> bytes:
        return bytes(self._data)

    @property
    def channel_count(self) -> int:
        return self._pixel_format.channel_count

    @property
    def bytes_per_pixel(self) -> int:
        return self._pixel_format.channel_count * self._component_type.byte_width

    @property
    def row_stride(self) -> int:
        return self._width * self.bytes_per_pixel

    @property
    def pixel_count(self) -> int:
        return self._width * self._height

    @property
    def size_bytes(self) -> int:
        return len(self._data)

    def to_array(self) -> np.ndarray:
        """``(H, W, C)`` view over the buffer; writes go straight into the image."""

        return np.frombuffer(self._data, dtype=self._component_type.dtype).reshape(
            self._height, self._width, self.channel_count
        )

    # -- channel order ----------------------------------------------------

    def swap_blue_red(self) -> None:
        """Swap channels 0 and 2 in place and flip RGB(A) <-> BGR(A).

        R and RG images are left untouched. Channel count and buffer length
        never change, so applying it twice restores the original image.
        """

        swapped = self._pixel_format.swapped
        if swapped is None:
            return
        pixels = self.to_array()
        pixels[..., [0, 2]] = pixels[..., [2, 0]]
        self._pixel_format = swapped

    def bgr_to_rgb(self) -> None:
        if self._pixel_format.is_bgr:
            self.swap_blue_red()

    def rgb_to_bgr(self) -> None:
        if self._pixel_format in (PixelFormat.RGB, PixelFormat.RGBA):
            self.swap_blue_red()

    # -- value semantics --------------------------------------------------

    def copy(self) -> "Image":
        return Image(self._data, self._width, self._height, self._pixel_format, self._component_type)

    __copy__ = copy

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return (
            self._width == other._width
            and self._height == other._height
            and self._pixel_format is other._pixel_format
            and self._component_type is other._component_type
            and self._data == other._data
        )

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return (
            f"Image({self._width}x{self._height}, {self._pixel_format.name}, "
            f"{self._component_type.name}, {len(self._data)} bytes)"
        )


def _check_dimension(value: Any, other: Any, name: str) -> int:
    try:
        return check_dimension(value, param_name=name)
    except (TypeError, ValueError) as exc:
        width, height = (value, other) if name == "width" else (other, value)
        raise InvalidDimensionsError(width, height, str(exc)) from exc
