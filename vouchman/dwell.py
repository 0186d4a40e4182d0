"""
Dwell-time evaluation.

Timers are lazy: nothing is scheduled. Whether a customer stayed long
enough is decided when stop() or status() runs, from two timestamps.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

_ONE_MS = timedelta(milliseconds=1)


@dataclass(frozen=True)
class DwellReading:
    """Elapsed vs. required dwell, in milliseconds."""

    elapsed_ms: int
    required_ms: int

    @property
    def satisfied(self) -> bool:
        return self.elapsed_ms >= self.required_ms

    @property
    def remaining_ms(self) -> int:
        return max(0, self.required_ms - self.elapsed_ms)

    @property
    def seconds_remaining(self) -> float:
        return self.remaining_ms / 1000

    @property
    def total_seconds(self) -> float:
        return self.required_ms / 1000


def required_ms(dwell_time_minutes: int | None, default_minutes: int | None = None) -> int:
    """Required dwell in ms. Unset or zero minutes fall back to the default."""
    if default_minutes is None:
        from vouchman.conf import vouchman_settings

        default_minutes = vouchman_settings.DEFAULT_DWELL_TIME_MINUTES
    return (dwell_time_minutes or default_minutes) * 60 * 1000


def read_dwell(
    start_time: datetime,
    now: datetime,
    dwell_time_minutes: int | None,
    default_minutes: int | None = None,
) -> DwellReading:
    """
    Compare wall-clock time spent against the location requirement.

    A start time in the future (clock skew between writers) counts as
    zero elapsed time.
    """
    elapsed = max(0, (now - start_time) // _ONE_MS)
    return DwellReading(
        elapsed_ms=elapsed,
        required_ms=required_ms(dwell_time_minutes, default_minutes),
    )
