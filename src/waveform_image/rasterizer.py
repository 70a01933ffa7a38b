"""Min/max envelope rasterizer for multichannel sample buffers."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from .colors import Rgba
from .errors import DimensionError

MAX_IMAGE_DIMENSION = 16_384


@dataclass(frozen=True)
class AudioSegment:
    """Decoded channel-major samples for the selected time window."""

    sample_rate: float
    samples: tuple[Sequence[float], ...]

    def __post_init__(self) -> None:
        if not self.samples:
            raise ValueError("audio segment needs at least one channel")
        lengths = {len(channel) for channel in self.samples}
        if len(lengths) != 1:
            raise ValueError("all channels must hold the same number of samples")

    @property
    def channel_count(self) -> int:
        return len(self.samples)

    @property
    def sample_count(self) -> int:
        return len(self.samples[0])


@dataclass(frozen=True)
class CanvasSpec:
    """Target bitmap size and colors for one render."""

    width: int
    height: int
    background: Rgba
    foreground: Rgba

    def __post_init__(self) -> None:
        if self.width > MAX_IMAGE_DIMENSION or self.height > MAX_IMAGE_DIMENSION:
            raise DimensionError(
                f"Image size too large. Max: {MAX_IMAGE_DIMENSION}"
                f" (requested {self.width}x{self.height})"
            )
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"canvas dimensions must be positive, got {self.width}x{self.height}"
            )


class PixelGrid:
    """Row-major RGBA pixel buffer, four bytes per pixel."""

    __slots__ = ("width", "height", "data")

    def __init__(self, width: int, height: int, fill: Rgba) -> None:
        self.width = width
        self.height = height
        self.data = bytearray(fill.to_bytes() * (width * height))

    def pixel(self, x: int, y: int) -> Rgba:
        offset = self._offset(x, y)
        red, green, blue, alpha = self.data[offset : offset + 4]
        return Rgba(red, green, blue, alpha)

    def set_pixel(self, x: int, y: int, color: Rgba) -> None:
        offset = self._offset(x, y)
        self.data[offset : offset + 4] = color.to_bytes()

    def fill_column(self, x: int, first_row: int, last_row: int, color: Rgba) -> None:
        """Paint rows ``first_row..last_row`` (inclusive) of column ``x``."""
        first_row = max(0, first_row)
        last_row = min(self.height - 1, last_row)
        if not 0 <= x < self.width or first_row > last_row:
            return
        raw = color.to_bytes()
        stride = self.width * 4
        offset = first_row * stride + x * 4
        for _ in range(first_row, last_row + 1):
            self.data[offset : offset + 4] = raw
            offset += stride

    def to_bytes(self) -> bytes:
        return bytes(self.data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self.data == other.data
        )

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        return (y * self.width + x) * 4


@dataclass(frozen=True)
class ChannelBand:
    """Horizontal strip of the canvas owned by one channel."""

    top: float
    height: float
    first_row: int
    end_row: int

    @property
    def mid_y(self) -> float:
        return self.top + self.height / 2.0


def channel_band(channel: int, channel_count: int, canvas_height: int) -> ChannelBand:
    """Return the band for ``channel``; integer rows never overlap neighbours."""
    if channel_count <= 0:
        raise ValueError("channel_count must be positive")
    band_height = canvas_height / channel_count
    return ChannelBand(
        top=channel * band_height,
        height=band_height,
        first_row=(channel * canvas_height) // channel_count,
        end_row=((channel + 1) * canvas_height) // channel_count,
    )


def column_sample_range(column: int, width: int, sample_count: int) -> tuple[int, int]:
    """Return the ``[start, end)`` sample slice that pixel ``column`` covers."""
    if sample_count <= 0:
        return 0, 0
    start = (column * sample_count) // width
    end = ((column + 1) * sample_count) // width
    start = max(0, min(sample_count - 1, start))
    end = max(0, min(sample_count, end))
    return start, end


def column_envelope(
    samples: Sequence[float], start: int, end: int
) -> tuple[float, float] | None:
    """Return ``(min, max)`` over ``samples[start:end]`` or None when empty.

    Minimum is seeded at +1.0 and maximum at -1.0, so a quiet column still
    reports its true extremes while out-of-range peaks pass through. NaN
    samples are ignored; a column holding nothing else counts as empty.
    """
    if end <= start:
        return None
    window = [value for value in samples[start:end] if not math.isnan(value)]
    if not window:
        return None
    return min(1.0, min(window)), max(-1.0, max(window))


def render_waveform(segment: AudioSegment, canvas: CanvasSpec) -> PixelGrid:
    """Rasterize one min/max envelope band per channel onto a fresh grid."""
    grid = PixelGrid(canvas.width, canvas.height, canvas.background)
    sample_count = segment.sample_count
    if sample_count == 0:
        return grid
    channel_count = segment.channel_count
    for channel, samples in enumerate(segment.samples):
        band = channel_band(channel, channel_count, canvas.height)
        _draw_channel(grid, samples, band, canvas, sample_count)
    return grid


def _draw_channel(
    grid: PixelGrid,
    samples: Sequence[float],
    band: ChannelBand,
    canvas: CanvasSpec,
    sample_count: int,
) -> None:
    half = band.height / 2.0
    mid_y = band.mid_y
    last_band_row = band.end_row - 1
    for column in range(canvas.width):
        start, end = column_sample_range(column, canvas.width, sample_count)
        envelope = column_envelope(samples, start, end)
        if envelope is None:
            continue
        min_val, max_val = envelope
        y1 = mid_y - min_val * half
        y2 = mid_y - max_val * half
        # Infinite peaks clip to the band edges.
        top_y = min(max(min(y1, y2), band.first_row), last_band_row)
        bottom_y = min(max(max(y1, y2), band.first_row), band.end_row)
        first_row = math.floor(top_y)
        last_row = max(first_row, math.ceil(bottom_y) - 1)
        grid.fill_column(
            column,
            max(band.first_row, first_row),
            min(last_band_row, last_row),
            canvas.foreground,
        )
