"""Small shared helpers for galaxy_image."""

from __future__ import annotations

from .optional_deps import optional_import, require
from .param_check import check_dimension, clamp_quality

__all__ = [
    "check_dimension",
    "clamp_quality",
    "optional_import",
    "require",
]
