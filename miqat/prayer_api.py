"""Fetch prayer times and Hijri dates from the Aladhan API."""

import datetime
import logging

import requests

from miqat.hijri import HIJRI_MONTHS, HijriDate
from miqat.prayer_calc import PRAYER_NAMES, GeoCoordinate, PrayerTimes

logger = logging.getLogger(__name__)

ALADHAN_BASE = "https://api.aladhan.com/v1"

# Calculation method: 2 = ISNA (Islamic Society of North America)
# 3 = MWL, 4 = Umm al-Qura (Mecca), 5 = Egypt, 20 = Turkey
DEFAULT_METHOD = 2


def _get_data(path: str, params: dict = None) -> dict:
    url = f"{ALADHAN_BASE}/{path}"
    logger.debug("GET %s %s", url, params or {})
    resp = requests.get(url, params=params, timeout=10)
    resp.raise_for_status()
    body = resp.json()
    if not isinstance(body, dict) or body.get("code") != 200 or "data" not in body:
        status = body.get("status") if isinstance(body, dict) else body
        raise ValueError(f"Aladhan API error: {status}")
    return body["data"]


def time_str_to_dt(time_str: str, date: datetime.date, tz=None) -> datetime.datetime:
    """
    Convert an 'HH:MM' string (optionally followed by ' (TZ)') to a datetime
    on `date`. If tz is None, returns naive datetime.
    """
    hour, minute = map(int, time_str[:5].split(":"))
    dt = datetime.datetime.combine(date, datetime.time(hour, minute))
    if tz is not None:
        dt = tz.localize(dt) if hasattr(tz, "localize") else dt.replace(tzinfo=tz)
    return dt


def fetch_prayer_times(
    lat: float,
    lon: float,
    date: datetime.date,
    method: int = DEFAULT_METHOD,
    tz=None,
) -> PrayerTimes:
    """
    Fetch the five prayer times for given coordinates and date.

    Raises requests.RequestException or ValueError on failure.
    """
    location = GeoCoordinate(lat, lon)
    params = {"latitude": lat, "longitude": lon, "method": method}
    if tz is not None:
        params["timezonestring"] = str(tz)
    data = _get_data(f"timings/{date.strftime('%d-%m-%Y')}", params)

    try:
        raw_timings = data["timings"]
        timings = {
            name.lower(): time_str_to_dt(raw_timings[name], date, tz)
            for name in PRAYER_NAMES
        }
    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"malformed Aladhan timings response: {exc!r}") from exc
    return PrayerTimes(location=location, date=date, **timings)


def fetch_hijri_date(date: datetime.date) -> HijriDate:
    """
    Fetch the Hijri date for a Gregorian date.

    Raises requests.RequestException or ValueError on failure.
    """
    data = _get_data("gToH", {"date": date.strftime("%d-%m-%Y")})
    try:
        hijri = data["hijri"]
        month = int(hijri["month"]["number"])
        return HijriDate(
            day=int(hijri["day"]),
            month=month,
            year=int(hijri["year"]),
            month_name=hijri["month"].get("en", HIJRI_MONTHS[month - 1]),
        )
    except (KeyError, TypeError, AttributeError, IndexError) as exc:
        raise ValueError(f"malformed Aladhan gToH response: {exc!r}") from exc
