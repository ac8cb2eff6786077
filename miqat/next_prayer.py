"""Resolve the next upcoming prayer and its countdown."""

import datetime
from dataclasses import dataclass

from miqat.prayer_calc import PrayerTimes, calculate_prayer_times


@dataclass(frozen=True)
class NextPrayer:
    name: str
    time: datetime.datetime
    countdown: str


def format_countdown(seconds: int) -> str:
    """Format seconds into HH:MM:SS countdown string."""
    if seconds < 0:
        return "00:00:00"
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


def seconds_until(target_dt: datetime.datetime, now: datetime.datetime) -> int:
    """Whole seconds from now until target_dt, floored (negative if past)."""
    return (target_dt - now) // datetime.timedelta(seconds=1)


def get_next_prayer(
    times: PrayerTimes,
    now: datetime.datetime = None,
    clock=datetime.datetime.now,
    calculate=calculate_prayer_times,
) -> NextPrayer:
    """
    Return the first prayer strictly after `now`.

    A prayer whose time equals `now` has already passed. When every prayer
    in `times` has passed, tomorrow's Fajr is computed via `calculate` for
    the same coordinates. `now` must be naive or aware to match `times`.
    """
    if now is None:
        now = clock()

    for name, prayer_dt in times.items():
        if prayer_dt > now:
            return NextPrayer(name, prayer_dt, format_countdown(seconds_until(prayer_dt, now)))

    tomorrow = calculate(
        times.location.latitude,
        times.location.longitude,
        now + datetime.timedelta(days=1),
    )
    return NextPrayer("Fajr", tomorrow.fajr, format_countdown(seconds_until(tomorrow.fajr, now)))
