#!/usr/bin/env python3
"""
Generate a favicon bundle from local image files.

Examples:
  favfav --src logo.png --out favicons.zip --android --windows
  favfav --size-src 16=logo-16.png --size-src 180=logo-180.png --apple
"""
from pathlib import Path
from typing import Dict, List, Optional
import argparse
import sys

from loguru import logger

from bundle.assembler import generate_bundle
from config import settings
from errors import FaviconError, InvalidOptionsError
from imaging.source_image import SourceImage, load_source
from logging_setup import configure_logging
from models import BuildMode, PlatformOptions


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate favicon assets from an image")
    parser.add_argument("--src", help="Source image for single-source mode")
    parser.add_argument(
        "--size-src",
        action="append",
        default=[],
        metavar="SIZE=PATH",
        help="Per-size source image (repeatable); switches to per-size mode",
    )
    parser.add_argument("--out", default=settings.archive_filename, help="Output ZIP path")
    parser.add_argument("--apple", action="store_true", help="Include Apple touch icons")
    parser.add_argument("--android", action="store_true", help="Include Android/PWA icons and manifest")
    parser.add_argument("--windows", action="store_true", help="Include Windows tiles and browserconfig")
    parser.add_argument("--app-name", default=settings.default_app_name)
    parser.add_argument("--short-name", default=settings.default_short_name)
    parser.add_argument("--theme-color", default=settings.default_theme_color)
    parser.add_argument(
        "--core-512",
        action=argparse.BooleanOptionalAction,
        default=settings.core_includes_512,
        help="Emit favicon-512x512.png (--no-core-512 turns it off)",
    )
    parser.add_argument("--log-level", default=settings.log_level)
    return parser.parse_args(argv)


def _read_source(path: str, label: str) -> SourceImage:
    return load_source(Path(path).read_bytes(), label=label)


def _parse_size_sources(specs: List[str]) -> Dict[int, SourceImage]:
    sources = {}
    for spec in specs:
        size_text, sep, path = spec.partition("=")
        if not sep or not path:
            raise InvalidOptionsError(f"Expected SIZE=PATH, got {spec!r}")
        try:
            size = int(size_text)
        except ValueError:
            raise InvalidOptionsError(f"Invalid size in {spec!r}") from None
        sources[size] = _read_source(path, label=f"size-{size}")
    return sources


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        if args.size_src:
            mode = BuildMode.PER_SIZE_SOURCE
            sources = _parse_size_sources(args.size_src)
        elif args.src:
            mode = BuildMode.SINGLE_SOURCE
            sources = _read_source(args.src, label=Path(args.src).name)
        else:
            logger.error("❌ Pass --src or at least one --size-src")
            return 1

        options = PlatformOptions(
            include_apple=args.apple,
            include_android=args.android,
            include_windows=args.windows,
            app_name=args.app_name,
            short_name=args.short_name,
            theme_color=args.theme_color,
            core_includes_512=args.core_512,
        )
        bundle = generate_bundle(mode, sources, options)
    except (FaviconError, OSError) as e:
        logger.error(f"❌ {e}")
        return 1

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(bundle.archive)

    logger.info(f"Favicon bundle written to: {out_path} ({len(bundle)} files)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
