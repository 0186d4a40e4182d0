"""Dwell-time evaluation tests."""

from datetime import datetime, timedelta, timezone as dt_timezone

import pytest

from vouchman.dwell import read_dwell, required_ms

START = datetime(2025, 3, 1, 9, 0, 0, tzinfo=dt_timezone.utc)


class TestRequiredMs:
    def test_uses_location_minutes(self):
        assert required_ms(10, default_minutes=5) == 600_000

    def test_unset_falls_back_to_default(self):
        assert required_ms(None, default_minutes=5) == 300_000

    def test_zero_falls_back_to_default(self):
        assert required_ms(0, default_minutes=5) == 300_000

    def test_default_comes_from_settings(self, settings):
        settings.VOUCHMAN = {**settings.VOUCHMAN, "DEFAULT_DWELL_TIME_MINUTES": 2}
        assert required_ms(None) == 120_000


class TestReadDwell:
    def test_one_ms_short_is_not_satisfied(self):
        reading = read_dwell(START, START + timedelta(milliseconds=299_999), 5)
        assert reading.elapsed_ms == 299_999
        assert not reading.satisfied
        assert reading.remaining_ms == 1

    def test_exact_boundary_is_satisfied(self):
        reading = read_dwell(START, START + timedelta(milliseconds=300_000), 5)
        assert reading.satisfied
        assert reading.remaining_ms == 0

    def test_overstay_never_goes_negative(self):
        reading = read_dwell(START, START + timedelta(hours=2), 5)
        assert reading.satisfied
        assert reading.seconds_remaining == 0

    def test_future_start_counts_as_zero_elapsed(self):
        reading = read_dwell(START + timedelta(seconds=30), START, 5)
        assert reading.elapsed_ms == 0
        assert not reading.satisfied

    def test_seconds_for_polling(self):
        reading = read_dwell(START, START + timedelta(seconds=90), 5)
        assert reading.seconds_remaining == pytest.approx(210.0)
        assert reading.total_seconds == pytest.approx(300.0)

    def test_sub_millisecond_is_truncated(self):
        reading = read_dwell(START, START + timedelta(microseconds=299_999_999), 5)
        assert reading.elapsed_ms == 299_999
        assert not reading.satisfied
