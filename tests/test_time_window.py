"""Tests for time window resolution and sample range selection."""

from __future__ import annotations

import pytest

from waveform_image.time_window import SampleRange, TimeWindow, resolve_time_window


@pytest.mark.parametrize(
    ("start", "end", "expected"),
    [
        (5, 30, (5.0, 30.0)),
        (5, 0, (5.0, 100.0)),
        (5, -10, (5.0, 90.0)),
        (150, 0, (100.0, 100.0)),
        (-3, 20, (0.0, 20.0)),
        (0, 250, (0.0, 100.0)),
    ],
)
def test_resolve_time_window_matrix(start, end, expected) -> None:
    window = resolve_time_window(start, end, 100.0)
    assert (window.start_seconds, window.end_seconds) == expected


def test_resolve_time_window_start_after_end_collapses_to_empty() -> None:
    window = resolve_time_window(40, 30, 100.0)
    assert window == TimeWindow(start_seconds=30.0, end_seconds=30.0)
    assert window.duration_seconds == 0.0


def test_resolve_time_window_very_negative_end_stays_non_negative() -> None:
    window = resolve_time_window(5, -150, 100.0)
    assert window.start_seconds == 0.0
    assert window.end_seconds == 0.0


def test_resolve_time_window_zero_length_audio() -> None:
    window = resolve_time_window(5, -1, 0.0)
    assert window == TimeWindow(0.0, 0.0)
    assert window.sample_range(44_100, 0) == SampleRange(start=0, count=0)


def test_sample_range_truncates_toward_zero() -> None:
    window = TimeWindow(start_seconds=0.5, end_seconds=1.25)
    sample_range = window.sample_range(1000.0, 10_000)
    assert sample_range == SampleRange(start=500, count=750)
    assert sample_range.end == 1250

    fractional = TimeWindow(start_seconds=0.0009, end_seconds=0.0031)
    assert fractional.sample_range(1000.0, 10_000) == SampleRange(start=0, count=2)


def test_sample_range_never_exceeds_total_samples() -> None:
    window = TimeWindow(start_seconds=0.25, end_seconds=1.0)
    sample_range = window.sample_range(48_000.0, 47_990)
    assert sample_range.start == 12_000
    assert sample_range.end == 47_990
