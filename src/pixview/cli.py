"""Entry point for the pixview CLI."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from PIL import Image, UnidentifiedImageError

from pixview import __version__
from pixview.config import ViewerConfig
from pixview.resample import FILTERS

logger = logging.getLogger(__name__)


class ImageLoadError(Exception):
    """The input file could not be opened or decoded."""


def load_image(path: str) -> Image.Image:
    """Decode *path* into an 8-bit RGB image."""
    try:
        with Image.open(path) as im:
            im.load()
            if im.mode == "RGB":
                return im.copy()
            if "A" in im.getbands() or im.mode == "P":
                # Flatten transparency onto black
                rgba = im.convert("RGBA")
                background = Image.new("RGB", rgba.size, (0, 0, 0))
                background.paste(rgba, mask=rgba.getchannel("A"))
                return background
            return im.convert("RGB")
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise ImageLoadError(str(e)) from e


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pixview",
        description="View an image in the terminal: pan, zoom and inspect pixel colors",
        epilog=(
            "keys: arrows pan (MOVE) / zoom (ZOOM) / move cursor (CURSOR), "
            "m/z/c switch mode, mouse wheel zooms, backspace resets, q quits"
        ),
    )
    parser.add_argument("image", help="Path of the image file to view")
    parser.add_argument("--aspect", type=float, help="Cell height/width ratio (default: 2.5)")
    parser.add_argument(
        "--threshold",
        type=int,
        help="Largest color distance merged into one run (default: 3)",
    )
    parser.add_argument(
        "--filter",
        choices=sorted(FILTERS),
        help="Resampling filter (default: nearest)",
    )
    parser.add_argument("--log-file", default=None, help="Write log records to this file")
    parser.add_argument(
        "--log-level", default="info", choices=["debug", "info", "warning", "error"]
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def _setup_logging(log_file: str | None, level: str) -> None:
    # The terminal is in raw mode while viewing; never log to it.
    handler: logging.Handler = (
        logging.FileHandler(log_file, encoding="utf-8")
        if log_file
        else logging.NullHandler()
    )
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[handler],
    )


def build_config(args: argparse.Namespace) -> ViewerConfig:
    config = ViewerConfig.from_env()
    overrides: dict[str, object] = {}
    if args.aspect is not None:
        overrides["aspect"] = args.aspect
    if args.threshold is not None:
        overrides["merge_threshold"] = args.threshold
    if args.filter is not None:
        overrides["resample_filter"] = args.filter
    if not overrides:
        return config
    return ViewerConfig(**{**config.__dict__, **overrides})  # type: ignore[arg-type]


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    _setup_logging(args.log_file, args.log_level)

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"pixview: invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        image = load_image(args.image)
    except ImageLoadError as e:
        print(f"pixview: cannot open image '{args.image}': {e}", file=sys.stderr)
        return 1

    logger.info("Loaded %s (%dx%d)", args.image, *image.size)

    if not sys.stdin.isatty() or not sys.stdout.isatty():
        print("pixview: stdin and stdout must be a terminal", file=sys.stderr)
        return 1

    from pixview.app import run

    try:
        asyncio.run(run(image, config, title=f"pixview - {os.path.basename(args.image)}"))
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
