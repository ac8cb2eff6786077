#!/usr/bin/env python3
"""
Miqat console widget
Terminal line refreshed every second showing:
  - Hijri date for today
  - Countdown to the next prayer
  - Desktop reminders at 10 and 5 minutes before each prayer
"""

import argparse
import datetime
import logging
import sys
import time

import pytz
import requests

from miqat.location import (
    DEFAULT_LOCATION,
    clear_manual_location,
    resolve_location,
    save_manual_location,
    to_coordinate,
)
from miqat.next_prayer import get_next_prayer
from miqat.notifier import schedule_reminders
from miqat.prayer_calc import GeoCoordinate
from miqat.provider import PROVIDERS, LocalProvider, PrayerTimesProvider, get_provider

logger = logging.getLogger("miqat")

REFRESH_SECONDS = 1  # update the line every second


# ──────────────────────────────────────────────────────────────────────────────
# Board: memoized day + per-tick next-prayer lookup
# ──────────────────────────────────────────────────────────────────────────────
class PrayerBoard:
    def __init__(self, provider: PrayerTimesProvider, location: dict, tz=pytz.utc):
        self.provider = provider
        self.fallback = LocalProvider()
        self.location = location
        self.coordinate = to_coordinate(location)
        self.tz = tz
        self._times = None
        self._hijri = None
        self._day = None
        self._next_times = None
        self._next_day = None

    def _call(self, op: str, *args):
        """Run `op` on the provider, dropping to the local engine if the remote one fails."""
        try:
            return getattr(self.provider, op)(*args)
        except (requests.RequestException, ValueError) as exc:
            if isinstance(self.provider, LocalProvider):
                raise
            logger.warning("%s failed on remote source, computing locally: %s", op, exc)
            return getattr(self.fallback, op)(*args)

    def _refresh_day(self, now: datetime.datetime) -> None:
        if now.date() == self._day:
            return
        if now.date() == self._next_day:
            self._times = self._next_times
        else:
            self._times = self._call("calculate_prayer_times", self.coordinate, now)
        self._hijri = self._call("gregorian_to_hijri", now)
        self._day = now.date()
        logger.info(
            "prayer times for %s: %s",
            self._day,
            ", ".join(f"{name} {dt:%H:%M}" for name, dt in self._times.items()),
        )

    def times(self, now: datetime.datetime):
        self._refresh_day(now)
        return self._times

    def hijri_line(self, now: datetime.datetime) -> str:
        self._refresh_day(now)
        return str(self._hijri)

    def _rollover_times(self, lat: float, lon: float, when: datetime.datetime):
        """Tomorrow's times, fetched once per day however often the board ticks after Isha."""
        if when.date() != self._next_day:
            self._next_times = self._call("calculate_prayer_times", GeoCoordinate(lat, lon), when)
            self._next_day = when.date()
        return self._next_times

    def next_prayer(self, now: datetime.datetime):
        return get_next_prayer(self.times(now), now, calculate=self._rollover_times)

    def tick(self, now: datetime.datetime) -> str:
        upcoming = self.next_prayer(now)
        return f"{upcoming.name}  {upcoming.countdown}"


# ──────────────────────────────────────────────────────────────────────────────
# CLI
# ──────────────────────────────────────────────────────────────────────────────
def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Hijri date and prayer countdown")
    parser.add_argument("--lat", type=float, help="latitude in degrees")
    parser.add_argument("--lon", type=float, help="longitude in degrees")
    parser.add_argument("--timezone", help="IANA timezone name, e.g. Africa/Cairo")
    parser.add_argument("--source", choices=sorted(PROVIDERS), default="local")
    parser.add_argument("--once", action="store_true", help="print once and exit")
    parser.add_argument("--save-location", action="store_true",
                        help="remember --lat/--lon/--timezone for later runs")
    parser.add_argument("--clear-location", action="store_true",
                        help="forget the saved location")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def location_from_args(args: argparse.Namespace) -> dict:
    if args.lat is None and args.lon is None:
        location = resolve_location()
    else:
        location = dict(DEFAULT_LOCATION, city="Custom", region="", country="")
        if args.lat is not None:
            location["lat"] = args.lat
        if args.lon is not None:
            location["lon"] = args.lon
    if args.timezone:
        location["timezone"] = args.timezone
    return location


def load_timezone(name: str):
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        logger.warning("unknown timezone %r, using UTC", name)
        return pytz.utc


def run(board: PrayerBoard, once: bool = False, out=None) -> None:
    out = out or sys.stdout
    reminded_for = None
    timers = []
    while True:
        now = datetime.datetime.now(board.tz)
        upcoming = board.next_prayer(now)
        line = f"{board.hijri_line(now)} | {upcoming.name}  {upcoming.countdown}"
        if once:
            print(line, file=out)
            return
        if upcoming.time != reminded_for:
            for t in timers:
                t.cancel()
            timers = schedule_reminders(upcoming, now)
            reminded_for = upcoming.time
        print(f"\r{line}", end="", file=out, flush=True)
        time.sleep(REFRESH_SECONDS)


# ──────────────────────────────────────────────────────────────────────────────
# Entry point
# ──────────────────────────────────────────────────────────────────────────────
def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.clear_location:
        clear_manual_location()

    try:
        location = location_from_args(args)
        board = PrayerBoard(get_provider(args.source), location, load_timezone(location["timezone"]))
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.save_location:
        save_manual_location(location)

    try:
        run(board, once=args.once)
    except KeyboardInterrupt:
        print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
