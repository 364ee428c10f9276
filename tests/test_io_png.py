import io

import numpy as np
import pytest

from galaxy_image import ComponentType, Image, ImageFormat, PixelFormat
from galaxy_image.errors import DecodeError, UnsupportedFormatError
from galaxy_image.formats.image_format import detect_from_bytes
from galaxy_image.io.png import decode_png, encode_png

pytest.importorskip("png")


@pytest.mark.parametrize("pixel_format", [PixelFormat.R, PixelFormat.RG, PixelFormat.RGB, PixelFormat.RGBA])
@pytest.mark.parametrize("component_type", [ComponentType.U8, ComponentType.U16])
def test_png_round_trip_is_exact(image_factory, pixel_format, component_type):
    image = image_factory(pixel_format, component_type, width=5, height=4)
    data = encode_png(image)

    assert detect_from_bytes(data) is ImageFormat.PNG
    assert decode_png(data) == image


def test_png_u16_samples_are_stored_little_endian():
    image = Image.from_array(np.array([[0x1234, 0xABCD]], dtype=np.uint16), PixelFormat.R)
    decoded = decode_png(encode_png(image))
    assert decoded.component_type is ComponentType.U16
    assert decoded.tobytes() == bytes([0x34, 0x12, 0xCD, 0xAB])


@pytest.mark.parametrize("pixel_format,expected", [(PixelFormat.BGR, PixelFormat.RGB), (PixelFormat.BGRA, PixelFormat.RGBA)])
def test_png_bgr_is_written_as_rgb(image_factory, pixel_format, expected):
    image = image_factory(pixel_format)
    decoded = decode_png(encode_png(image))

    image.bgr_to_rgb()
    assert decoded.pixel_format is expected
    assert decoded == image


def test_png_rejects_float_images(image_factory):
    with pytest.raises(UnsupportedFormatError, match="PNG does not support F32 component type"):
        encode_png(image_factory(PixelFormat.RGB, ComponentType.F32))


def test_png_rejects_indexed_color():
    PILImage = pytest.importorskip("PIL.Image")
    buffer = io.BytesIO()
    PILImage.new("P", (3, 2), color=1).save(buffer, format="PNG")

    with pytest.raises(UnsupportedFormatError, match="PNG indexed color not supported"):
        decode_png(buffer.getvalue())


def test_png_rejects_corrupt_bitstream(image_factory):
    data = encode_png(image_factory(PixelFormat.RGB))

    with pytest.raises(DecodeError, match="PNG decoding error"):
        decode_png(data[:8] + b"\x00" * 16)
    with pytest.raises(DecodeError):
        decode_png(b"\x89PNG")
