"""Render min/max waveform PNG images from audio files."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _dist_version

from .version import __version__ as _source_version

__all__ = ["__version__"]

try:
    __version__ = _dist_version("waveform-image")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = _source_version
