"""Tests for runtime config precedence and render config construction."""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path

import pytest

from waveform_image.cli import build_parser
from waveform_image.colors import Rgba
from waveform_image.errors import DimensionError, UsageError
from waveform_image.runtime_config import (
    DEFAULT_BACKGROUND,
    DEFAULT_FOREGROUND,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    build_render_config,
    resolve_log_level,
)


def test_resolve_log_level_precedence_matrix() -> None:
    assert resolve_log_level(verbose=False, quiet=False) == "INFO"
    assert resolve_log_level(verbose=True, quiet=False) == "DEBUG"
    assert resolve_log_level(verbose=False, quiet=True) == "WARNING"
    assert resolve_log_level(verbose=True, quiet=True) == "WARNING"


def test_build_render_config_from_parsed_args() -> None:
    args = build_parser().parse_args(
        ["-i", "in.flac", "-o", "out.png", "-s", "1.5", "-e", "-2", "-b", "11223344"]
    )
    config = build_render_config(args)

    assert config.input_path == Path("in.flac")
    assert config.output_path == Path("out.png")
    assert (config.start_seconds, config.end_seconds) == (1.5, -2.0)
    assert config.canvas.width == DEFAULT_WIDTH
    assert config.canvas.height == DEFAULT_HEIGHT
    assert config.canvas.background == Rgba(0x11, 0x22, 0x33, 0x44)
    assert config.canvas.foreground == Rgba(255, 255, 255, 255)


def test_build_render_config_rejects_oversized_canvas() -> None:
    args = build_parser().parse_args(["-i", "a.wav", "-o", "b.png", "-h", "20000"])
    with pytest.raises(DimensionError):
        build_render_config(args)


def test_build_render_config_rejects_blank_paths() -> None:
    args = Namespace(
        input="",
        output="b.png",
        start=0.0,
        end=0.0,
        width=10,
        height=10,
        background=Rgba(0, 0, 0, 255),
        foreground=Rgba(255, 255, 255, 255),
    )
    with pytest.raises(UsageError):
        build_render_config(args)


def test_build_render_config_defaults_colors_through_the_parser() -> None:
    args = build_parser().parse_args(["-i", "a.wav", "-o", "b.png"])
    canvas = build_render_config(args).canvas
    assert canvas.background == DEFAULT_BACKGROUND
    assert canvas.foreground == DEFAULT_FOREGROUND
