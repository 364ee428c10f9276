from __future__ import annotations

from .io import ConvertOptions, load_config, parse_convert_options, resolve_convert_options

__all__ = ["ConvertOptions", "load_config", "parse_convert_options", "resolve_convert_options"]
