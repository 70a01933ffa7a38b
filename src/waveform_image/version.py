"""Project version source of truth."""

from __future__ import annotations

import platform

__all__ = ["__version__", "build_help_epilog"]

# Manually updated for each release.
__version__ = "0.3.0"

_EXAMPLE = (
    'waveform-image -i "song.wav" -o "waveform.png" '
    "-s 5 -e 30 -w 1920 -h 300 -b 1e1e1eff -f 00ffffff"
)


def build_help_epilog() -> str:
    return (
        f"Example:\n  {_EXAMPLE}\n\n"
        f"Platform: {platform.platform()}\n"
        f"Version: {__version__}"
    )
