import numpy as np
import pytest

from galaxy_image import ComponentType, Image, PixelFormat


def make_image(pixel_format, component_type=ComponentType.U8, width=4, height=3, seed=0):
    """Deterministic image whose samples stay well inside every component range."""

    pixel_format = PixelFormat(pixel_format)
    component_type = ComponentType(component_type)
    rng = np.random.default_rng(seed)
    shape = (height, width, pixel_format.channel_count)
    if component_type is ComponentType.U8:
        arr = rng.integers(0, 256, size=shape).astype(np.uint8)
    elif component_type is ComponentType.U16:
        arr = rng.integers(0, 65536, size=shape).astype(np.uint16)
    elif component_type is ComponentType.F16:
        arr = rng.uniform(-4.0, 4.0, size=shape).astype(np.float16)
    else:
        arr = rng.uniform(-4.0, 4.0, size=shape).astype(np.float32)
    return Image.from_array(arr, pixel_format)


@pytest.fixture
def image_factory():
    return make_image
