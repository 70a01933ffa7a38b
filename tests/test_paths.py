"""Tests for platform-specific paths."""

from __future__ import annotations

from pathlib import Path

import waveform_image.paths as paths


class FakeAppDirs:
    """Minimal AppDirs stand-in used to control the log root during tests."""

    def __init__(self, log_root: Path) -> None:
        self.user_log_dir = str(log_root)


def test_log_dir_uses_platformdirs_and_creates_it(tmp_path, monkeypatch) -> None:
    log_root = tmp_path / "state" / "waveform-image" / "log"

    def fake_app_dirs(app_name: str, appauthor: bool | None = None) -> FakeAppDirs:
        assert app_name == "waveform-image"
        assert appauthor is False
        return FakeAppDirs(log_root)

    monkeypatch.setattr(paths, "AppDirs", fake_app_dirs)
    paths.get_app_dirs.cache_clear()
    try:
        assert paths.log_dir() == log_root
        assert log_root.is_dir()
    finally:
        paths.get_app_dirs.cache_clear()
