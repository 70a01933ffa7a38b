"""Error types surfaced to the CLI exit path."""

from __future__ import annotations


class WaveformImageError(Exception):
    """Base class for failures that end one render invocation."""

    exit_code = 1


class UsageError(WaveformImageError):
    """Missing or malformed command-line arguments."""


class DimensionError(WaveformImageError):
    """Requested image width or height exceeds the supported maximum."""


class InputNotFoundError(WaveformImageError):
    """Input path does not resolve to an existing file."""


class DecodeError(WaveformImageError):
    """No decoder recognized the input, or decoding failed."""


class EncodeError(WaveformImageError):
    """Writing the output image failed."""
