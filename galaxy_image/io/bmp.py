"""BMP adapter built on OpenCV.

OpenCV decodes BMP as 8-bit BGR (alpha is discarded), which is converted to
canonical RGB right away. On encode the canonical RGB rows are flipped back
to BGR for the codec.
"""

from __future__ import annotations

import logging

import numpy as np

from galaxy_image.errors import DecodeError, EncodeError
from galaxy_image.formats.image_format import ImageFormat
from galaxy_image.formats.pixel_format import PixelFormat
from galaxy_image.image import Image
from galaxy_image.io.capabilities import reduce_for_encode
from galaxy_image.utils.optional_deps import require

logger = logging.getLogger(__name__)

_SIGNATURE = b"BM"


def _cv2():
    return require("cv2", purpose="BMP support")


def decode_bmp(data: bytes) -> Image:
    if bytes(data[:2]) != _SIGNATURE:
        raise DecodeError(ImageFormat.BMP.value, "malformed bitstream (missing BM header)")
    cv2 = _cv2()
    encoded = np.frombuffer(bytes(data), dtype=np.uint8)
    try:
        bgr = cv2.imdecode(encoded, cv2.IMREAD_COLOR)
    except cv2.error as exc:
        raise DecodeError(ImageFormat.BMP.value, "malformed bitstream", cause=exc) from exc
    if bgr is None:
        raise DecodeError(ImageFormat.BMP.value, "malformed bitstream")

    image = Image.from_array(bgr, PixelFormat.BGR)
    image.bgr_to_rgb()
    logger.debug("BMP decoded %dx%d", image.width, image.height)
    return image


def encode_bmp(image: Image) -> bytes:
    rgb, _ = reduce_for_encode(image, ImageFormat.BMP)
    cv2 = _cv2()
    bgr = np.ascontiguousarray(rgb[..., ::-1])
    try:
        ok, encoded = cv2.imencode(".bmp", bgr)
    except cv2.error as exc:
        raise EncodeError(ImageFormat.BMP.value, "encoder rejected image", cause=exc) from exc
    if not ok:
        raise EncodeError(ImageFormat.BMP.value, "encoder rejected image")
    return encoded.tobytes()
