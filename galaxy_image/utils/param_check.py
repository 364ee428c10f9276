"""Parameter validation for image dimensions and encoder settings."""

from __future__ import annotations

import math
from numbers import Integral, Real

MAX_DIMENSION = 2**32 - 1
MIN_QUALITY = 1
MAX_QUALITY = 100


def check_dimension(value: Integral, *, param_name: str = "dimension") -> int:
    """Validate a width/height: an integer in ``[0, 2**32 - 1]``."""

    if not isinstance(value, Integral) or isinstance(value, bool):
        raise TypeError(f"{param_name} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{param_name} must be >= 0, got {value}")
    if value > MAX_DIMENSION:
        raise ValueError(f"{param_name} must be <= {MAX_DIMENSION}, got {value}")
    return int(value)


def clamp_quality(value: Real) -> int:
    """Clamp a lossy-encoder quality into ``[1, 100]``.

    Out-of-range values, infinities included, are pulled to the nearest bound
    before truncating to an integer. NaN has no nearest bound and is rejected.
    """

    if not isinstance(value, Real) or isinstance(value, bool):
        raise TypeError(f"quality must be a real number, got {type(value).__name__}")
    if math.isnan(value):
        raise ValueError("quality must not be NaN")
    return int(max(MIN_QUALITY, min(MAX_QUALITY, value)))
