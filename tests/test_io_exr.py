import numpy as np
import pytest

from galaxy_image import ComponentType, Image, ImageFormat, PixelFormat, load_from_bytes, load_from_file
from galaxy_image.errors import UnsupportedFormatError
from galaxy_image.formats.image_format import detect_from_bytes
from galaxy_image.io.exr import decode_exr, encode_exr

OpenEXR = pytest.importorskip("OpenEXR")
Imath = pytest.importorskip("Imath")


def _write_exr(path, width, height, channels):
    """Write raw EXR channels: ``{name: (Imath pixel type constant, ndarray)}``."""

    header = OpenEXR.Header(width, height)
    header["channels"] = {
        name: Imath.Channel(Imath.PixelType(pixel_type)) for name, (pixel_type, _) in channels.items()
    }
    out = OpenEXR.OutputFile(str(path), header)
    try:
        out.writePixels({name: samples.tobytes() for name, (_, samples) in channels.items()})
    finally:
        out.close()


@pytest.mark.parametrize("pixel_format", list(PixelFormat))
@pytest.mark.parametrize("component_type", [ComponentType.F16, ComponentType.F32])
def test_exr_round_trip(image_factory, pixel_format, component_type):
    image = image_factory(pixel_format, component_type, width=6, height=5)
    data = encode_exr(image)

    assert detect_from_bytes(data) is ImageFormat.EXR
    decoded = decode_exr(data)
    image.bgr_to_rgb()
    assert decoded == image


def test_exr_f32_value_survives():
    image = Image.from_array(np.full((2, 2, 3), 2.5, dtype=np.float32), PixelFormat.RGB)
    decoded = decode_exr(encode_exr(image))
    assert decoded.component_type is ComponentType.F32
    assert np.allclose(decoded.to_array(), 2.5, atol=0.001)


def test_exr_half_bits_decode_to_one():
    raw = bytes([0x00, 0x3C])
    image = Image.from_raw(raw, 1, 1, PixelFormat.R, ComponentType.F16)
    decoded = decode_exr(encode_exr(image))
    assert decoded.pixel_format is PixelFormat.R
    assert decoded.component_type is ComponentType.F16
    assert decoded.tobytes() == raw
    assert float(decoded.to_array()[0, 0, 0]) == 1.0


def test_exr_luminance_file(tmp_path):
    path = tmp_path / "grey.exr"
    _write_exr(path, 2, 1, {"Y": (Imath.PixelType.FLOAT, np.array([0.25, 0.75], dtype=np.float32))})

    image = load_from_file(path)
    assert image.pixel_format is PixelFormat.R
    assert image.to_array().reshape(-1).tolist() == [0.25, 0.75]


def test_exr_uint_channels_become_f32(tmp_path):
    path = tmp_path / "ids.exr"
    values = np.array([1, 2, 3, 4], dtype=np.uint32)
    _write_exr(
        path,
        2,
        2,
        {name: (Imath.PixelType.UINT, values * (i + 1)) for i, name in enumerate("RGB")},
    )

    image = load_from_bytes(path.read_bytes(), ImageFormat.EXR)
    assert image.pixel_format is PixelFormat.RGB
    assert image.component_type is ComponentType.F32
    assert image.to_array()[1, 1].tolist() == [4.0, 8.0, 12.0]


def test_exr_mixed_channels_become_f32(tmp_path):
    path = tmp_path / "mixed.exr"
    _write_exr(
        path,
        1,
        1,
        {
            "R": (Imath.PixelType.HALF, np.array([0.5], dtype=np.float16)),
            "A": (Imath.PixelType.FLOAT, np.array([0.125], dtype=np.float32)),
        },
    )

    image = load_from_file(path)
    assert image.pixel_format is PixelFormat.RG
    assert image.component_type is ComponentType.F32
    assert image.to_array()[0, 0].tolist() == [0.5, 0.125]


def test_exr_without_recognized_channels(tmp_path):
    path = tmp_path / "depth.exr"
    _write_exr(path, 1, 1, {"Z": (Imath.PixelType.FLOAT, np.array([3.0], dtype=np.float32))})

    with pytest.raises(UnsupportedFormatError, match=r"found \['Z'\]"):
        load_from_file(path)
