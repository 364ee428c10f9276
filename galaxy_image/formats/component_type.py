from __future__ import annotations

from enum import Enum

import numpy as np


class ComponentType(str, Enum):
    """Storage kind of a single channel sample."""

    U8 = "u8"
    U16 = "u16"
    F16 = "f16"
    F32 = "f32"

    @property
    def byte_width(self) -> int:
        return _BYTE_WIDTH[self]

    @property
    def dtype(self) -> np.dtype:
        """Little-endian numpy dtype used for this kind inside an Image buffer."""
        return _DTYPES[self]


_BYTE_WIDTH = {
    ComponentType.U8: 1,
    ComponentType.U16: 2,
    ComponentType.F16: 2,
    ComponentType.F32: 4,
}

_DTYPES = {
    ComponentType.U8: np.dtype("u1"),
    ComponentType.U16: np.dtype("<u2"),
    ComponentType.F16: np.dtype("<f2"),
    ComponentType.F32: np.dtype("<f4"),
}


def parse_component_type(raw: str | ComponentType) -> ComponentType:
    if isinstance(raw, ComponentType):
        return raw
    try:
        return ComponentType(str(raw).lower())
    except ValueError as exc:
        raise ValueError(f"Unknown component type: {raw!r}") from exc


def component_type_for_dtype(dtype) -> ComponentType:
    """Map a numpy dtype (any byte order) onto its component type."""

    kind = np.dtype(dtype)
    for component_type, candidate in _DTYPES.items():
        if kind.kind == candidate.kind and kind.itemsize == candidate.itemsize:
            return component_type
    raise ValueError(f"No component type for dtype {kind}")
