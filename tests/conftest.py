"""Test configuration."""

from __future__ import annotations

import logging
import math
import sys
import wave
from collections.abc import Iterator
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def write_wave(
    path: Path,
    *,
    seconds: float = 0.5,
    sample_rate: int = 8000,
    channels: int = 2,
    sample_width: int = 2,
    amplitude: float = 0.5,
) -> None:
    """Write a sine-wave WAV fixture; channel ``n`` uses frequency ``220 * (n + 1)``."""
    frame_count = int(seconds * sample_rate)
    full_scale = 2 ** (8 * sample_width - 1) - 1
    payload = bytearray()
    for idx in range(frame_count):
        for channel in range(channels):
            phase = 2.0 * math.pi * 220.0 * (channel + 1) * idx / sample_rate
            value = int(full_scale * amplitude * math.sin(phase))
            if sample_width == 1:
                payload.append(value + 128)
            else:
                payload.extend(value.to_bytes(sample_width, "little", signed=True))
    with wave.open(str(path), "wb") as handle:
        handle.setnchannels(channels)
        handle.setsampwidth(sample_width)
        handle.setframerate(sample_rate)
        handle.writeframes(bytes(payload))


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    """Restore root logger handlers/level mutated by setup_logging."""
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    try:
        yield
    finally:
        for handler in root.handlers:
            if handler not in original_handlers:
                handler.close()
        root.handlers.clear()
        for handler in original_handlers:
            root.addHandler(handler)
        root.setLevel(original_level)
