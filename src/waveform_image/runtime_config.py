"""Runtime configuration normalization helpers.

These helpers keep CLI flag interpretation deterministic and build the single
immutable ``RenderConfig`` passed through the render pipeline.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path

from .colors import BLACK, WHITE
from .errors import UsageError
from .rasterizer import MAX_IMAGE_DIMENSION, CanvasSpec

__all__ = [
    "DEFAULT_BACKGROUND",
    "DEFAULT_FOREGROUND",
    "DEFAULT_HEIGHT",
    "DEFAULT_WIDTH",
    "MAX_IMAGE_DIMENSION",
    "RenderConfig",
    "build_render_config",
    "resolve_log_level",
]

DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 300
DEFAULT_BACKGROUND = BLACK
DEFAULT_FOREGROUND = WHITE


@dataclass(frozen=True)
class RenderConfig:
    """Everything one render needs, fixed at startup."""

    input_path: Path
    output_path: Path
    start_seconds: float
    end_seconds: float
    canvas: CanvasSpec


def resolve_log_level(*, verbose: bool, quiet: bool) -> str:
    """Resolve effective log level from CLI flags.

    Precedence is deterministic: --quiet overrides --verbose.
    """
    if quiet:
        return "WARNING"
    if verbose:
        return "DEBUG"
    return "INFO"


def build_render_config(args: argparse.Namespace) -> RenderConfig:
    """Build the render config from parsed CLI arguments.

    Raises ``UsageError`` for blank paths and ``DimensionError`` for oversized
    canvases.
    """
    if not args.input or not args.output:
        raise UsageError("Both -i <input> and -o <output> are required.")
    canvas = CanvasSpec(
        width=int(args.width),
        height=int(args.height),
        background=args.background,
        foreground=args.foreground,
    )
    return RenderConfig(
        input_path=Path(args.input),
        output_path=Path(args.output),
        start_seconds=float(args.start),
        end_seconds=float(args.end),
        canvas=canvas,
    )
