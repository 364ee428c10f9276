"""Baseline JPEG adapter built on Pillow."""

from __future__ import annotations

import io
import logging

import numpy as np

from galaxy_image.errors import DecodeError, EncodeError, UnsupportedFormatError
from galaxy_image.formats.image_format import ImageFormat
from galaxy_image.formats.pixel_format import PixelFormat
from galaxy_image.image import Image
from galaxy_image.io.capabilities import reduce_for_encode
from galaxy_image.utils.optional_deps import require

logger = logging.getLogger(__name__)

_MODES = {
    "L": PixelFormat.R,
    "RGB": PixelFormat.RGB,
}


def _pil_image():
    return require("PIL.Image", purpose="JPEG support")


def decode_jpeg(data: bytes) -> Image:
    PILImage = _pil_image()
    try:
        with PILImage.open(io.BytesIO(bytes(data)), formats=("JPEG",)) as pil:
            if pil.mode == "CMYK":
                raise UnsupportedFormatError("JPEG CMYK format not supported")
            pixel_format = _MODES.get(pil.mode)
            if pixel_format is None:
                raise UnsupportedFormatError(f"JPEG color mode {pil.mode} not supported")
            pil.load()
            pixels = np.asarray(pil, dtype=np.uint8)
    except UnsupportedFormatError:
        raise
    except (OSError, SyntaxError, ValueError) as exc:
        # Pillow reports bad bitstreams as OSError subclasses; there is no
        # real file I/O here.
        raise DecodeError(ImageFormat.JPEG.value, "malformed bitstream", cause=exc) from exc

    logger.debug("JPEG decoded %dx%d %s", pixels.shape[1], pixels.shape[0], pixel_format.name)
    return Image.from_array(pixels, pixel_format)


def encode_jpeg(image: Image, quality: int) -> bytes:
    """Encode as baseline JPEG. `quality` is expected in ``[1, 100]``."""

    pixels, pixel_format = reduce_for_encode(image, ImageFormat.JPEG)
    PILImage = _pil_image()
    if pixel_format is PixelFormat.R:
        pixels = pixels[..., 0]

    buffer = io.BytesIO()
    try:
        PILImage.fromarray(pixels).save(buffer, format="JPEG", quality=int(quality))
    except (OSError, ValueError) as exc:
        raise EncodeError(ImageFormat.JPEG.value, "encoder rejected image", cause=exc) from exc
    return buffer.getvalue()
