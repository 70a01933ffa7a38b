"""Where waveform-image keeps its per-user log files."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from platformdirs import AppDirs

APP_NAME = "waveform-image"


@lru_cache(maxsize=1)
def get_app_dirs() -> AppDirs:
    return AppDirs(APP_NAME, appauthor=False)


def log_dir() -> Path:
    """Return the platform's per-user log directory, creating it if needed."""
    path = Path(get_app_dirs().user_log_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path
