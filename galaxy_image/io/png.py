"""PNG adapter built on pypng.

pypng exposes the native colour type (greyscale / alpha / palette) and bit
depth, which map one-to-one onto :class:`PixelFormat` and
:class:`ComponentType`.
"""

from __future__ import annotations

import io
import logging
import zlib

import numpy as np

from galaxy_image.errors import DecodeError, EncodeError, UnsupportedFormatError
from galaxy_image.formats.component_type import ComponentType
from galaxy_image.formats.image_format import ImageFormat
from galaxy_image.formats.pixel_format import PixelFormat
from galaxy_image.image import Image
from galaxy_image.io.capabilities import reduce_for_encode
from galaxy_image.utils.optional_deps import require

logger = logging.getLogger(__name__)

# (greyscale, alpha) -> layout
_COLOR_TYPES = {
    (True, False): PixelFormat.R,
    (True, True): PixelFormat.RG,
    (False, False): PixelFormat.RGB,
    (False, True): PixelFormat.RGBA,
}

_BIT_DEPTHS = {
    8: ComponentType.U8,
    16: ComponentType.U16,
}


def _png():
    return require("png", purpose="PNG support")


def decode_png(data: bytes) -> Image:
    png = _png()
    try:
        width, height, rows, info = png.Reader(bytes=bytes(data)).read()
        if info.get("palette") is not None:
            raise UnsupportedFormatError("PNG indexed color not supported")
        bitdepth = int(info["bitdepth"])
        component_type = _BIT_DEPTHS.get(bitdepth)
        if component_type is None:
            raise UnsupportedFormatError(f"PNG bit depth {bitdepth} not supported")
        pixel_format = _COLOR_TYPES[(bool(info["greyscale"]), bool(info["alpha"]))]

        dtype = np.uint16 if component_type is ComponentType.U16 else np.uint8
        pixels = np.vstack([np.asarray(row, dtype=dtype) for row in rows])
    except (png.Error, zlib.error, EOFError) as exc:
        raise DecodeError(ImageFormat.PNG.value, "malformed bitstream", cause=exc) from exc

    pixels = pixels.reshape(height, width, pixel_format.channel_count)
    logger.debug("PNG decoded %dx%d %s/%s", width, height, pixel_format.name, component_type.name)
    return Image.from_array(pixels, pixel_format)


def encode_png(image: Image) -> bytes:
    pixels, pixel_format = reduce_for_encode(image, ImageFormat.PNG)
    png = _png()

    writer = png.Writer(
        width=image.width,
        height=image.height,
        greyscale=pixel_format in (PixelFormat.R, PixelFormat.RG),
        alpha=pixel_format.has_alpha,
        bitdepth=8 * image.component_type.byte_width,
    )
    rows = pixels.reshape(image.height, -1)
    buffer = io.BytesIO()
    try:
        writer.write(buffer, rows.tolist())
    except png.Error as exc:
        raise EncodeError(ImageFormat.PNG.value, "writer rejected image", cause=exc) from exc
    return buffer.getvalue()
