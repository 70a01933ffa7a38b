"""Resolve requested start/end seconds into a clamped window and sample range."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SampleRange:
    """Absolute sample offset and length selected from decoded audio."""

    start: int
    count: int

    @property
    def end(self) -> int:
        return self.start + self.count


@dataclass(frozen=True)
class TimeWindow:
    """Absolute time range in seconds, always inside ``[0, total_duration]``."""

    start_seconds: float
    end_seconds: float

    @property
    def duration_seconds(self) -> float:
        return self.end_seconds - self.start_seconds

    def sample_range(self, sample_rate: float, total_samples: int) -> SampleRange:
        """Map the window to sample indexes, truncating toward zero.

        The range never reaches past ``total_samples`` so float rounding at the
        end of the file cannot request samples the decoder does not have.
        """
        if sample_rate <= 0:
            return SampleRange(start=0, count=0)
        total = max(0, int(total_samples))
        start = min(total, max(0, int(self.start_seconds * sample_rate)))
        count = max(0, int(self.duration_seconds * sample_rate))
        return SampleRange(start=start, count=min(count, total - start))


def resolve_time_window(
    requested_start: float,
    requested_end: float,
    total_duration: float,
) -> TimeWindow:
    """Resolve user-facing start/end parameters against the audio duration.

    ``requested_end`` of 0 means "until the end", a negative value counts back
    from the end, and a positive value is absolute. Start is clamped into
    ``[0, actual_end]`` so a start past the end collapses to an empty window.
    """
    duration = max(0.0, float(total_duration))
    if requested_end == 0:
        actual_end = duration
    elif requested_end < 0:
        actual_end = duration + requested_end
    else:
        actual_end = float(requested_end)
    actual_end = max(0.0, min(duration, actual_end))
    actual_start = max(0.0, min(actual_end, float(requested_start)))
    return TimeWindow(start_seconds=actual_start, end_seconds=actual_end)
