"""Single-pass render pipeline: decode, select window, rasterize, encode."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .errors import DecodeError
from .rasterizer import AudioSegment, render_waveform
from .runtime_config import RenderConfig
from .services.audio_decode import AudioDecoder, duration_seconds, open_decoder
from .services.image_encode import ImageEncoder, PngImageEncoder
from .time_window import SampleRange, TimeWindow, resolve_time_window

logger = logging.getLogger(__name__)

DecoderFactory = Callable[[Path], AudioDecoder]


@dataclass(frozen=True)
class RenderResult:
    """Outcome of one successful render."""

    output_path: Path
    window: TimeWindow
    sample_range: SampleRange
    channel_count: int
    sample_rate: float
    elapsed_s: float


def render_waveform_file(
    config: RenderConfig,
    *,
    decoder_factory: DecoderFactory = open_decoder,
    encoder: ImageEncoder | None = None,
) -> RenderResult:
    """Render ``config.input_path`` to ``config.output_path``.

    Errors from the decoder and encoder propagate unchanged.
    """
    started = time.perf_counter()
    decoder = decoder_factory(config.input_path)
    if decoder.channel_count <= 0 or decoder.sample_rate <= 0:
        raise DecodeError(f"Decoder reported no usable audio in {config.input_path}")

    total_duration = duration_seconds(decoder)
    window = resolve_time_window(
        config.start_seconds, config.end_seconds, total_duration
    )
    sample_range = window.sample_range(decoder.sample_rate, decoder.total_sample_count)
    logger.info(
        "Resolved time window %.3fs-%.3fs of %.3fs",
        window.start_seconds,
        window.end_seconds,
        total_duration,
        extra={
            "sample_start": sample_range.start,
            "sample_count": sample_range.count,
            "channels": decoder.channel_count,
            "sample_rate": decoder.sample_rate,
        },
    )

    segment = read_segment(decoder, sample_range)
    grid = render_waveform(segment, config.canvas)
    (encoder or PngImageEncoder()).encode(grid, config.output_path)

    elapsed_s = time.perf_counter() - started
    logger.info(
        "Encoded waveform image %s",
        config.output_path,
        extra={"elapsed_s": round(elapsed_s, 4)},
    )
    return RenderResult(
        output_path=config.output_path,
        window=window,
        sample_range=sample_range,
        channel_count=segment.channel_count,
        sample_rate=segment.sample_rate,
        elapsed_s=elapsed_s,
    )


def read_segment(decoder: AudioDecoder, sample_range: SampleRange) -> AudioSegment:
    """Read ``sample_range``, trimming channels to their shortest common length."""
    channels = decoder.read(sample_range.start, sample_range.count)
    if len(channels) != decoder.channel_count:
        raise DecodeError(
            f"Decoder returned {len(channels)} channels, expected"
            f" {decoder.channel_count}"
        )
    length = min(len(channel) for channel in channels)
    if length < sample_range.count:
        logger.warning(
            "Short read: got %d of %d samples", length, sample_range.count
        )
    return AudioSegment(
        sample_rate=decoder.sample_rate,
        samples=tuple(list(channel[:length]) for channel in channels),
    )
