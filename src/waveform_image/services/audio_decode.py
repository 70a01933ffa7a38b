"""Audio decoders that expose channel-major float samples for rendering."""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
import wave
from pathlib import Path
from typing import Protocol

from ..errors import DecodeError, InputNotFoundError

logger = logging.getLogger(__name__)

_WAVE_SUFFIXES = {".wav", ".wave"}
_FFMPEG_SAMPLE_WIDTH = 2


class AudioDecoder(Protocol):
    """Random-access source of decoded PCM samples."""

    @property
    def channel_count(self) -> int: ...

    @property
    def sample_rate(self) -> float: ...

    @property
    def total_sample_count(self) -> int: ...

    def read(self, start_sample: int, sample_count: int) -> list[list[float]]:
        """Return ``sample_count`` samples per channel starting at ``start_sample``."""
        ...


def duration_seconds(decoder: AudioDecoder) -> float:
    if decoder.sample_rate <= 0:
        return 0.0
    return decoder.total_sample_count / decoder.sample_rate


class WaveAudioDecoder:
    """Integer PCM WAV decoder backed by the standard library ``wave`` module."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        with wave.open(str(self.path), "rb") as handle:
            self._channels = int(handle.getnchannels())
            self._frame_rate = int(handle.getframerate())
            self._sample_width = int(handle.getsampwidth())
            self._frame_count = int(handle.getnframes())
        if self._channels <= 0 or self._frame_rate <= 0:
            raise DecodeError(f"Invalid WAV header: {self.path}")
        if self._sample_width not in (1, 2, 3, 4):
            raise DecodeError(f"Unsupported WAV sample width: {self._sample_width}")

    @property
    def channel_count(self) -> int:
        return self._channels

    @property
    def sample_rate(self) -> float:
        return float(self._frame_rate)

    @property
    def total_sample_count(self) -> int:
        return self._frame_count

    def read(self, start_sample: int, sample_count: int) -> list[list[float]]:
        start = max(0, min(self._frame_count, start_sample))
        count = max(0, min(self._frame_count - start, sample_count))
        if count == 0:
            return [[] for _ in range(self._channels)]
        try:
            with wave.open(str(self.path), "rb") as handle:
                handle.setpos(start)
                raw = handle.readframes(count)
        except (wave.Error, EOFError, OSError) as exc:
            raise DecodeError(f"Failed to read WAV frames: {exc}") from exc
        return pcm_to_channels(
            raw, channels=self._channels, sample_width=self._sample_width
        )


class FfmpegAudioDecoder:
    """Decode any ffmpeg-readable media into memory at its native layout."""

    def __init__(self, path: Path | str, *, timeout_s: float = 120.0) -> None:
        self.path = Path(path)
        ffmpeg_bin = shutil.which("ffmpeg")
        ffprobe_bin = shutil.which("ffprobe")
        if ffmpeg_bin is None or ffprobe_bin is None:
            raise DecodeError("ffmpeg/ffprobe not found on PATH")
        self._channels, self._rate = _probe_stream(ffprobe_bin, self.path, timeout_s)
        raw = _decode_s16le(
            ffmpeg_bin,
            self.path,
            channels=self._channels,
            sample_rate=self._rate,
            timeout_s=timeout_s,
        )
        self._samples = pcm_to_channels(
            raw, channels=self._channels, sample_width=_FFMPEG_SAMPLE_WIDTH
        )

    @property
    def channel_count(self) -> int:
        return self._channels

    @property
    def sample_rate(self) -> float:
        return float(self._rate)

    @property
    def total_sample_count(self) -> int:
        return len(self._samples[0]) if self._samples else 0

    def read(self, start_sample: int, sample_count: int) -> list[list[float]]:
        total = self.total_sample_count
        start = max(0, min(total, start_sample))
        end = start + max(0, min(total - start, sample_count))
        return [channel[start:end] for channel in self._samples]


def ffmpeg_available() -> bool:
    return shutil.which("ffmpeg") is not None and shutil.which("ffprobe") is not None


def open_decoder(path: Path | str) -> AudioDecoder:
    """Open the first decoder that recognizes ``path``.

    WAV input is read with ``wave``; anything it rejects goes to ffmpeg when
    available. Raises ``InputNotFoundError`` or ``DecodeError``.
    """
    source = Path(path)
    if not source.exists() or not source.is_file():
        raise InputNotFoundError(f"Input file does not exist: {source.resolve()}")

    wave_error: Exception | None = None
    try:
        return WaveAudioDecoder(source)
    except (wave.Error, EOFError, DecodeError) as exc:
        wave_error = exc
        logger.debug("wave decoder rejected %s: %s", source, exc)
    except OSError as exc:
        raise DecodeError(f"Failed to open input audio file: {exc}") from exc

    if not ffmpeg_available():
        if source.suffix.lower() in _WAVE_SUFFIXES:
            raise DecodeError(f"Failed to read input audio file: {wave_error}")
        raise DecodeError(
            "Failed to read input audio file. Install ffmpeg for non-WAV input."
        )
    logger.debug("Falling back to ffmpeg decode", extra={"path": str(source)})
    return FfmpegAudioDecoder(source)


def pcm_to_channels(
    raw: bytes,
    *,
    channels: int,
    sample_width: int,
) -> list[list[float]]:
    """Split interleaved little-endian PCM into normalized per-channel floats."""
    bytes_per_frame = channels * sample_width
    frame_count = len(raw) // bytes_per_frame
    out: list[list[float]] = [[] for _ in range(channels)]
    if frame_count <= 0:
        return out
    max_value = _sample_max(sample_width)
    for frame_idx in range(frame_count):
        offset = frame_idx * bytes_per_frame
        for channel in range(channels):
            sample = _read_sample(raw, offset + channel * sample_width, sample_width)
            out[channel].append(sample / max_value)
    return out


def _probe_stream(ffprobe_bin: str, path: Path, timeout_s: float) -> tuple[int, int]:
    cmd = [
        ffprobe_bin,
        "-v",
        "error",
        "-select_streams",
        "a:0",
        "-show_entries",
        "stream=channels,sample_rate",
        "-of",
        "json",
        str(path),
    ]
    try:
        proc = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout_s,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        raise DecodeError(f"ffprobe launch failed: {exc}") from exc
    if proc.returncode != 0:
        raise DecodeError(f"ffprobe could not read {path} (exit={proc.returncode})")
    try:
        streams = json.loads(proc.stdout or "{}").get("streams") or []
        stream = streams[0]
        channels = int(stream["channels"])
        rate = int(stream["sample_rate"])
    except (ValueError, LookupError, TypeError, AttributeError) as exc:
        raise DecodeError(f"No audio stream found in {path}") from exc
    if channels <= 0 or rate <= 0:
        raise DecodeError(f"Invalid audio stream in {path}")
    return channels, rate


def _decode_s16le(
    ffmpeg_bin: str,
    path: Path,
    *,
    channels: int,
    sample_rate: int,
    timeout_s: float,
) -> bytes:
    cmd = [
        ffmpeg_bin,
        "-v",
        "error",
        "-i",
        str(path),
        "-vn",
        "-sn",
        "-dn",
        "-f",
        "s16le",
        "-acodec",
        "pcm_s16le",
        "-ac",
        str(channels),
        "-ar",
        str(sample_rate),
        "pipe:1",
    ]
    try:
        proc = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            timeout=timeout_s,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        raise DecodeError(f"ffmpeg decode failed: {exc}") from exc
    if proc.returncode != 0:
        raise DecodeError(f"ffmpeg could not decode {path} (exit={proc.returncode})")
    return proc.stdout


def _read_sample(raw: bytes, offset: int, sample_width: int) -> int:
    if sample_width == 1:
        return raw[offset] - 128
    if sample_width == 2:
        return int.from_bytes(raw[offset : offset + 2], "little", signed=True)
    if sample_width == 3:
        value = int.from_bytes(raw[offset : offset + 3], "little", signed=False)
        if value & 0x800000:
            value -= 0x1000000
        return value
    if sample_width == 4:
        return int.from_bytes(raw[offset : offset + 4], "little", signed=True)
    raise ValueError("Unsupported sample width")


def _sample_max(sample_width: int) -> float:
    if sample_width == 1:
        return 128.0
    if sample_width == 2:
        return 32768.0
    if sample_width == 3:
        return 8_388_608.0
    if sample_width == 4:
        return 2_147_483_648.0
    return 32768.0
