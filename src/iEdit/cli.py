"""Command line entry point: headless rendering and the editor window."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import EXPORT_FILENAME, SUPPORTED_EXPORT_FORMATS
from .core.adjustment_state import ADJUSTMENT_KEYS, PARAMETER_SPECS
from .core.session import EditSession
from .errors import IEditError
from .utils.logging import set_level

_LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for ``iedit``."""

    parser = argparse.ArgumentParser(
        prog="iedit",
        description="Apply non-destructive adjustments to an image",
    )
    parser.add_argument(
        "--loglevel",
        metavar="LEVEL",
        default="WARNING",
        help="Logging level, default WARNING",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    render_parser = commands.add_parser("render", help="Render an edited copy of INPUT")
    render_parser.add_argument("input", metavar="INPUT", type=Path, help="Input image file")
    render_parser.add_argument(
        "-o",
        "--output",
        metavar="PATH",
        type=Path,
        default=Path(EXPORT_FILENAME),
        help=f"Output file or directory, default {EXPORT_FILENAME}",
    )
    render_parser.add_argument(
        "--format",
        metavar="FORMAT",
        type=str.upper,
        choices=SUPPORTED_EXPORT_FORMATS,
        default=None,
        help="Output format; inferred from the output suffix when omitted.",
    )
    for key in ADJUSTMENT_KEYS:
        spec = PARAMETER_SPECS[key]
        parser_type = int if spec.integer else float
        render_parser.add_argument(
            f"--{key}",
            metavar="N",
            type=parser_type,
            default=spec.default,
            help=(
                f"{spec.label} in [{spec.minimum:g}, {spec.maximum:g}]{spec.unit}, "
                f"default {spec.default:g}. Out-of-range values are clamped."
            ),
        )

    gui_parser = commands.add_parser("gui", help="Open the editor window")
    gui_parser.add_argument("image", metavar="IMAGE", type=Path, nargs="?", help="Image to open")
    return parser


def run_render(args: argparse.Namespace) -> Path:
    """Render ``args.input`` with the requested adjustments and save the result."""

    session = EditSession()
    try:
        session.load(args.input)
        session.update(**{key: getattr(args, key) for key in ADJUSTMENT_KEYS})
        return session.save(args.output, fmt=args.format)
    finally:
        session.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse *argv* and run the selected command; return the exit status."""

    args = build_parser().parse_args(argv)
    set_level(args.loglevel)

    if args.command == "gui":
        from .gui.main import main as gui_main

        return gui_main([str(args.image)] if args.image else [])

    try:
        output = run_render(args)
    except IEditError as exc:
        _LOGGER.debug("render of %s failed", args.input, exc_info=exc)
        print(f"iedit: error: {exc}", file=sys.stderr)
        return 1
    print(output)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
