"""Conversion defaults read from a JSON or YAML file.

A config file is a mapping with at most two keys: ``format`` (any name
:func:`parse_image_format` accepts) and ``quality`` (a JPEG quality, clamped
to ``[1, 100]``). Both are validated on load, so callers receive
:class:`ConvertOptions` rather than raw dicts.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from galaxy_image.api import DEFAULT_JPEG_QUALITY
from galaxy_image.formats.image_format import ImageFormat, parse_image_format
from galaxy_image.utils.optional_deps import require
from galaxy_image.utils.param_check import clamp_quality

CONFIG_KEYS = ("format", "quality")


@dataclass(frozen=True)
class ConvertOptions:
    """Output format and JPEG quality for a conversion; ``None`` means unset."""

    image_format: Optional[ImageFormat] = None
    quality: Optional[int] = None


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _read_yaml(path: Path) -> Any:
    yaml = require("yaml", purpose="YAML config files")
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"{path}: invalid YAML ({exc})") from exc


_READERS: Mapping[str, Callable[[Path], Any]] = {
    ".json": _read_json,
    ".yml": _read_yaml,
    ".yaml": _read_yaml,
}


def parse_convert_options(raw: Any, *, source: str = "config") -> ConvertOptions:
    """Validate a decoded config document and turn it into :class:`ConvertOptions`."""

    if not isinstance(raw, Mapping):
        raise ValueError(f"{source}: expected a mapping with keys {', '.join(CONFIG_KEYS)}, got {type(raw).__name__}")

    unknown = sorted(str(key) for key in raw if key not in CONFIG_KEYS)
    if unknown:
        raise ValueError(f"{source}: unknown config keys {unknown}; supported: {', '.join(CONFIG_KEYS)}")

    image_format = None
    if raw.get("format") is not None:
        try:
            image_format = parse_image_format(raw["format"])
        except ValueError as exc:
            raise ValueError(f"{source}: {exc}") from exc

    quality = None
    if raw.get("quality") is not None:
        try:
            quality = clamp_quality(raw["quality"])
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{source}: {exc}") from exc

    return ConvertOptions(image_format=image_format, quality=quality)


def load_config(path: str | Path) -> ConvertOptions:
    """Read conversion defaults from ``.json`` or ``.yml``/``.yaml`` (YAML needs PyYAML).

    An empty document yields an empty :class:`ConvertOptions`.
    """

    config_path = Path(path)
    reader = _READERS.get(config_path.suffix.lower())
    if reader is None:
        raise ValueError(
            f"Unsupported config extension {config_path.suffix!r} for {str(config_path)!r}; "
            "use .json, .yml or .yaml"
        )

    document = reader(config_path)
    if document is None:
        return ConvertOptions()
    return parse_convert_options(document, source=str(config_path))


def resolve_convert_options(
    options: Optional[ConvertOptions] = None,
    *,
    image_format: Optional[str | ImageFormat] = None,
    quality: Optional[float] = None,
) -> ConvertOptions:
    """Layer explicit overrides on top of `options`.

    The result always carries a quality (``DEFAULT_JPEG_QUALITY`` when nothing
    set one). The format stays ``None`` when neither source names one.
    """

    base = options if options is not None else ConvertOptions()
    fmt = parse_image_format(image_format) if image_format is not None else base.image_format
    raw_quality = quality if quality is not None else base.quality
    resolved = clamp_quality(raw_quality) if raw_quality is not None else DEFAULT_JPEG_QUALITY
    return ConvertOptions(image_format=fmt, quality=resolved)
