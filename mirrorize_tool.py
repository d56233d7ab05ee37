"""
Command line tool for mirrorizing images.

Usage:
    python mirrorize_tool.py <input_image> [direction ...] [-o output_image]
                             [--engine pillow|imagemagick|graphicsmagick]
                             [--strict] [--verbose]

Directions are applied in the order given; with no direction the image is
mirrored west.

Examples:
    python mirrorize_tool.py input.png
    python mirrorize_tool.py input.png north west
    python mirrorize_tool.py input.png southeast -o tile.png --engine imagemagick
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from MZ_Libs.constants import (
    DEFAULT_DIRECTION,
    DEFAULT_ENGINE,
    EXIT_FAILURE,
    EXIT_OK,
    SUPPORTED_ENGINES,
)
from MZ_Libs.DirectiveLib.directive_models import Direction
from MZ_Libs.EngineLib.image_handle import ImageHandle


def default_output_path(input_path: Path, directions: List[str]) -> Path:
    label = "_".join(directions) if directions else DEFAULT_DIRECTION
    return input_path.with_name(f"{input_path.stem}_{label}{input_path.suffix}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mirrorize_tool",
        description="Kaleidoscope-style mirroring of an image",
    )
    parser.add_argument("input", help="Image to mirror")
    parser.add_argument(
        "directions",
        nargs="*",
        help=f"Directions to apply in order ({', '.join(Direction.names())})",
    )
    parser.add_argument("-o", "--output", help="Output image (default: <input>_<directions>.<ext>)")
    parser.add_argument("--engine", default=DEFAULT_ENGINE, choices=SUPPORTED_ENGINES)
    parser.add_argument("--strict", action="store_true", help="Fail on unknown directions")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log queued directives")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the tool; returns the process exit code."""
    args = build_parser().parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = Path(args.input)
    if not input_path.is_file():
        print(f"Error: {input_path} is not a valid file")
        return EXIT_FAILURE

    output_path = Path(args.output) if args.output else default_output_path(input_path, args.directions)

    handle = ImageHandle(input_path, options={"engine": args.engine})
    try:
        for direction in args.directions or [None]:
            handle.mirrorize(direction, strict=args.strict)
        handle.write(output_path)
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}")
        return EXIT_FAILURE

    print(f"Saved mirrored image to {output_path}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
