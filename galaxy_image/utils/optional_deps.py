"""Codec binding import helpers.

Each codec adapter imports its binding lazily so `import galaxy_image` stays
cheap and a missing binding only affects the formats that need it.
"""

from __future__ import annotations

from importlib import import_module
from types import ModuleType
from typing import Optional, Tuple


_PIP_NAME_OVERRIDES = {
    # Module ↔ pip package mismatches.
    "cv2": "opencv-python",
    "PIL": "Pillow",
    "png": "pypng",
    "Imath": "OpenEXR",
    "yaml": "PyYAML",
}


def optional_import(module_name: str) -> Tuple[Optional[ModuleType], Optional[BaseException]]:
    """Attempt to import a module, returning (module, error)."""

    try:
        return import_module(module_name), None
    except ImportError as exc:
        return None, exc


def require(module_name: str, *, purpose: Optional[str] = None) -> ModuleType:
    """Import `module_name`, raising a clean ImportError with install hint if missing."""

    module, error = optional_import(module_name)
    if module is not None:
        return module

    root = str(module_name).split(".", 1)[0]
    pip_target = _PIP_NAME_OVERRIDES.get(root, root)
    context = f" for {purpose}" if purpose else ""
    raise ImportError(
        f"Module '{module_name}' is required{context}.\n"
        f"Install it via:\n  pip install '{pip_target}'\n"
        f"Original error: {error}"
    ) from error
