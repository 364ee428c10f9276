import io

import numpy as np
import pytest

from galaxy_image import ComponentType, Image, ImageFormat, PixelFormat, save_to_bytes
from galaxy_image.errors import DecodeError, UnsupportedFormatError
from galaxy_image.formats.image_format import detect_from_bytes
from galaxy_image.io.jpeg import decode_jpeg, encode_jpeg

PILImage = pytest.importorskip("PIL.Image")


def _solid(pixel_format, values, size=16):
    arr = np.empty((size, size, len(values)), dtype=np.uint8)
    arr[...] = values
    return Image.from_array(arr, pixel_format)


def test_jpeg_round_trip_is_close():
    image = _solid(PixelFormat.RGB, [200, 100, 50])
    data = encode_jpeg(image, 95)

    assert detect_from_bytes(data) is ImageFormat.JPEG
    decoded = decode_jpeg(data)
    assert decoded.pixel_format is PixelFormat.RGB
    assert decoded.component_type is ComponentType.U8
    assert (decoded.width, decoded.height) == (16, 16)
    diff = np.abs(decoded.to_array().astype(int) - image.to_array().astype(int))
    assert diff.max() <= 8


def test_jpeg_grey_round_trip():
    decoded = decode_jpeg(encode_jpeg(_solid(PixelFormat.R, [128]), 90))
    assert decoded.pixel_format is PixelFormat.R
    assert np.abs(decoded.to_array().astype(int) - 128).max() <= 2


def test_jpeg_rg_keeps_only_luminance():
    decoded = decode_jpeg(encode_jpeg(_solid(PixelFormat.RG, [60, 250]), 90))
    assert decoded.pixel_format is PixelFormat.R
    assert np.abs(decoded.to_array().astype(int) - 60).max() <= 2


def test_jpeg_bgra_and_rgba_encode_identically():
    rgba = _solid(PixelFormat.RGBA, [10, 120, 240, 7])
    bgra = _solid(PixelFormat.BGRA, [240, 120, 10, 7])
    assert encode_jpeg(rgba, 80) == encode_jpeg(bgra, 80)


def test_jpeg_quality_is_clamped():
    image = _solid(PixelFormat.RGB, [30, 60, 90])
    assert save_to_bytes(image, ImageFormat.JPEG, 0) == save_to_bytes(image, ImageFormat.JPEG, 1)
    assert save_to_bytes(image, ImageFormat.JPEG, 500) == save_to_bytes(image, ImageFormat.JPEG, 100)
    assert save_to_bytes(image, "jpg") == save_to_bytes(image, "jpeg", 90)


def test_jpeg_rejects_cmyk():
    buffer = io.BytesIO()
    PILImage.new("CMYK", (4, 4), color=(0, 0, 0, 0)).save(buffer, format="JPEG")

    with pytest.raises(UnsupportedFormatError, match="JPEG CMYK format not supported"):
        decode_jpeg(buffer.getvalue())


def test_jpeg_rejects_wide_samples():
    image = Image.allocate(2, 2, PixelFormat.RGB, ComponentType.U16)
    with pytest.raises(UnsupportedFormatError, match="JPEG does not support U16"):
        encode_jpeg(image, 90)


def test_jpeg_rejects_garbage():
    with pytest.raises(DecodeError, match="JPEG decoding error"):
        decode_jpeg(b"\xff\xd8" + b"\x00" * 30)
