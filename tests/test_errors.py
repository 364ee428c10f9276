import pytest

from galaxy_image.errors import (
    DecodeError,
    EmptyDataError,
    EncodeError,
    ImageError,
    InvalidDimensionsError,
    InvalidPixelFormatError,
    UnsupportedFormatError,
)


@pytest.mark.parametrize(
    "error_type",
    [UnsupportedFormatError, InvalidPixelFormatError, InvalidDimensionsError, EmptyDataError],
)
def test_value_errors_are_image_errors(error_type):
    assert issubclass(error_type, ImageError)
    assert issubclass(error_type, ValueError)


def test_invalid_dimensions_message():
    err = InvalidDimensionsError(3, 4, "too small")
    assert str(err) == "Invalid dimensions: 3x4 (too small)"
    assert (err.width, err.height) == (3, 4)
    assert str(InvalidDimensionsError(0, 1)) == "Invalid dimensions: 0x1"


def test_codec_errors_carry_format_and_cause():
    cause = RuntimeError("bad crc")
    err = DecodeError("png", "malformed bitstream", cause=cause)
    assert isinstance(err, ImageError)
    assert not isinstance(err, ValueError)
    assert err.image_format == "png"
    assert err.cause is cause
    assert str(err) == "PNG decoding error: malformed bitstream (bad crc)"

    assert str(EncodeError("exr", "writer rejected image")) == "EXR encoding error: writer rejected image"
