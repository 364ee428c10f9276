from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from galaxy_image.errors import ImageError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="galaxy-image",
        description="Inspect and convert PNG/BMP/JPEG/EXR images.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    detect = sub.add_parser("detect", help="Print the detected format of a file")
    detect.add_argument("path", help="Image file path")

    info = sub.add_parser("info", help="Decode a file and print its layout")
    info.add_argument("path", help="Image file path")
    info.add_argument("--json", action="store_true", help="Print a JSON object instead of text")

    convert = sub.add_parser("convert", help="Decode SRC and re-encode it as DST")
    convert.add_argument("src", help="Input image path")
    convert.add_argument("dst", help="Output image path")
    convert.add_argument(
        "--format",
        default=None,
        choices=["png", "bmp", "jpg", "jpeg", "exr"],
        help="Output format. Default: config 'format', else the DST extension",
    )
    convert.add_argument(
        "--quality",
        type=int,
        default=None,
        help="JPEG quality, clamped to 1..100. Default: config 'quality', else 90",
    )
    convert.add_argument(
        "--config",
        default=None,
        help="Optional JSON/YAML file with default 'format' and 'quality'",
    )
    return parser


def _describe(path: Path) -> dict[str, Any]:
    from galaxy_image.api import load_from_bytes
    from galaxy_image.formats.image_format import detect_format

    data = path.read_bytes()
    fmt = detect_format(data, path)
    image = load_from_bytes(data, fmt)
    return {
        "path": str(path),
        "format": fmt.value,
        "width": image.width,
        "height": image.height,
        "pixel_format": image.pixel_format.name,
        "component_type": image.component_type.name,
        "size_bytes": image.size_bytes,
    }


def _convert(args: argparse.Namespace) -> str:
    from galaxy_image.api import load_from_file, save_to_file_with_quality
    from galaxy_image.config.io import load_config, resolve_convert_options
    from galaxy_image.formats.image_format import ImageFormat, detect_from_extension

    defaults = load_config(args.config) if args.config is not None else None
    options = resolve_convert_options(defaults, image_format=args.format, quality=args.quality)
    fmt, quality = options.image_format, options.quality
    if fmt is None:
        fmt = detect_from_extension(args.dst)
    if fmt is ImageFormat.UNKNOWN:
        raise ValueError(f"Cannot infer output format from {args.dst!r}; pass --format.")

    image = load_from_file(args.src)
    save_to_file_with_quality(image, args.dst, fmt, quality)
    return f"{args.src} -> {args.dst} ({fmt.name}, {image.width}x{image.height})"


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if bool(args.verbose):
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "detect":
            from galaxy_image.formats.image_format import detect_format

            path = Path(str(args.path))
            print(detect_format(path.read_bytes(), path).value)
        elif args.command == "info":
            payload = _describe(Path(str(args.path)))
            if bool(args.json):
                print(json.dumps(payload, indent=2, sort_keys=True))
            else:
                print(
                    f"{payload['format']}: {payload['width']}x{payload['height']} "
                    f"{payload['pixel_format']} {payload['component_type']}"
                )
        else:
            print(_convert(args))
    except (ImageError, OSError, ValueError, ImportError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
