"""Command-line interface for waveform-image."""

from __future__ import annotations

import argparse
import logging
import math
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn

from . import __version__
from .colors import Rgba, parse_hex_color
from .errors import UsageError, WaveformImageError
from .logging_utils import setup_logging
from .paths import log_dir
from .pipeline import render_waveform_file
from .runtime_config import (
    DEFAULT_BACKGROUND,
    DEFAULT_FOREGROUND,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    MAX_IMAGE_DIMENSION,
    RenderConfig,
    build_render_config,
    resolve_log_level,
)
from .version import build_help_epilog


class WaveformArgumentParser(argparse.ArgumentParser):
    """Parser that raises ``UsageError`` instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)

    def parse_known_args(  # type: ignore[override]
        self,
        args: Sequence[str] | None = None,
        namespace: argparse.Namespace | None = None,
    ) -> tuple[argparse.Namespace, list[str]]:
        if args is None:
            args = sys.argv[1:]
        return super().parse_known_args(_attach_seconds_values(args), namespace)


_SECONDS_FLAGS = frozenset({"-s", "-e"})


def _attach_seconds_values(argv: Sequence[str]) -> list[str]:
    """Join ``-s``/``-e`` with a following negative number such as ``-1e1``.

    argparse only recognizes plain negative numbers like ``-10`` as values, so
    an exponent form would otherwise be read as an unknown option.
    """
    joined: list[str] = []
    for token in argv:
        if joined and joined[-1] in _SECONDS_FLAGS and _is_negative_number(token):
            joined[-1] = f"{joined[-1]}={token}"
        else:
            joined.append(token)
    return joined


def _is_negative_number(token: str) -> bool:
    if not token.startswith("-"):
        return False
    try:
        float(token)
    except ValueError:
        return False
    return True


def _seconds(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid seconds value: {value!r}") from None
    if not math.isfinite(seconds):
        raise argparse.ArgumentTypeError(f"seconds must be finite: {value!r}")
    return seconds


def _dimension(value: str) -> int:
    try:
        pixels = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid pixel count: {value!r}") from None
    if pixels <= 0:
        raise argparse.ArgumentTypeError(f"pixel count must be positive: {value!r}")
    return pixels


def _hex_color(value: str) -> Rgba:
    try:
        return parse_hex_color(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = WaveformArgumentParser(
        prog="waveform-image",
        description="Render a min/max waveform PNG from a segment of an audio file.",
        epilog=build_help_epilog(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("--help", action="help", help="Show this help and exit")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-i", dest="input", metavar="INPUT", required=True, help="Input audio file path"
    )
    parser.add_argument(
        "-o", dest="output", metavar="OUTPUT", required=True, help="Output PNG path"
    )
    parser.add_argument(
        "-s",
        dest="start",
        metavar="SECONDS",
        type=_seconds,
        default=0.0,
        help="Start time in seconds (default: 0)",
    )
    parser.add_argument(
        "-e",
        dest="end",
        metavar="SECONDS",
        type=_seconds,
        default=0.0,
        help="End time in seconds; 0 means until end, negative counts from the end",
    )
    parser.add_argument(
        "-w",
        dest="width",
        metavar="PIXELS",
        type=_dimension,
        default=DEFAULT_WIDTH,
        help=f"Image width (default: {DEFAULT_WIDTH}, max: {MAX_IMAGE_DIMENSION})",
    )
    parser.add_argument(
        "-h",
        dest="height",
        metavar="PIXELS",
        type=_dimension,
        default=DEFAULT_HEIGHT,
        help=f"Image height (default: {DEFAULT_HEIGHT}, max: {MAX_IMAGE_DIMENSION})",
    )
    parser.add_argument(
        "-b",
        dest="background",
        metavar="RRGGBBAA",
        type=_hex_color,
        default=DEFAULT_BACKGROUND.to_hex(),
        help=f"Background color (default: {DEFAULT_BACKGROUND.to_hex()})",
    )
    parser.add_argument(
        "-f",
        dest="foreground",
        metavar="RRGGBBAA",
        type=_hex_color,
        default=DEFAULT_FOREGROUND.to_hex(),
        help=f"Waveform color (default: {DEFAULT_FOREGROUND.to_hex()})",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "--quiet", action="store_true", help="Only show warnings and errors"
    )
    parser.add_argument("--log-file", help="Write logs to a file path")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        parser.print_help()
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    except SystemExit as exc:  # --help and --version
        return 0 if exc.code is None else int(exc.code)

    logger = logging.getLogger(__name__)
    try:
        level = resolve_log_level(verbose=args.verbose, quiet=args.quiet)
        setup_logging(
            log_dir=log_dir(),
            level=level,
            log_file=Path(args.log_file) if args.log_file else None,
        )
        config = build_render_config(args)
        _log_parameters(logger, config)
        result = render_waveform_file(config)
        print(f"Waveform image saved to: {result.output_path.resolve()}")
        return 0
    except UsageError as exc:
        parser.print_help()
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    except WaveformImageError as exc:
        logger.error("Render failed: %s", exc, extra={"error": type(exc).__name__})
        print(str(exc), file=sys.stderr)
        return exc.exit_code
    except Exception as exc:  # pragma: no cover - top-level safety net
        logger.exception("Unhandled error: %s", exc)
        print("Unexpected error. Re-run with --verbose for details.", file=sys.stderr)
        return 1


def _log_parameters(logger: logging.Logger, config: RenderConfig) -> None:
    canvas = config.canvas
    logger.info(
        "Rendering %s -> %s",
        config.input_path,
        config.output_path,
        extra={
            "start_s": config.start_seconds,
            "end_s": config.end_seconds,
            "width": canvas.width,
            "height": canvas.height,
            "background": canvas.background.to_hex(),
            "foreground": canvas.foreground.to_hex(),
        },
    )


if __name__ == "__main__":
    raise SystemExit(main())
