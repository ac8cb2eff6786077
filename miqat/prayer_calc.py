"""Local prayer-time calculation from coordinates and date."""

import datetime
from dataclasses import dataclass

from miqat.solar import (
    FAJR_ALTITUDE,
    ISHA_ALTITUDE,
    MAGHRIB_ALTITUDE,
    MINUTES_PER_DEGREE,
    asr_altitude,
    day_of_year,
    hour_angle,
    solar_declination,
)

PRAYER_NAMES = ("Fajr", "Dhuhr", "Asr", "Maghrib", "Isha")


@dataclass(frozen=True)
class GeoCoordinate:
    latitude: float
    longitude: float

    def __post_init__(self):
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range [-90, 90]: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range [-180, 180]: {self.longitude}")


MECCA = GeoCoordinate(21.3891, 39.8579)


@dataclass(frozen=True)
class PrayerTimes:
    """The five prayer times of one civil day at one location."""

    fajr: datetime.datetime
    dhuhr: datetime.datetime
    asr: datetime.datetime
    maghrib: datetime.datetime
    isha: datetime.datetime
    location: GeoCoordinate = MECCA
    date: datetime.date | None = None

    def items(self) -> list:
        """(name, datetime) pairs in chronological key order."""
        return [(name, getattr(self, name.lower())) for name in PRAYER_NAMES]


def _local_noon(when) -> datetime.datetime:
    if not isinstance(when, datetime.datetime):
        return datetime.datetime.combine(when, datetime.time(12))
    tz = when.tzinfo
    naive_noon = datetime.datetime.combine(when.date(), datetime.time(12))
    if hasattr(tz, "localize"):  # pytz zone
        return tz.localize(naive_noon)
    return naive_noon.replace(tzinfo=tz)


def _shift(base: datetime.datetime, minutes: float) -> datetime.datetime:
    shifted = base + datetime.timedelta(minutes=minutes)
    if hasattr(shifted.tzinfo, "normalize"):
        shifted = shifted.tzinfo.normalize(shifted)
    return shifted


def calculate_prayer_times(
    latitude: float = MECCA.latitude,
    longitude: float = MECCA.longitude,
    when=None,
    clock=datetime.datetime.now,
) -> PrayerTimes:
    """
    Compute Fajr, Dhuhr, Asr, Maghrib and Isha for the civil date of `when`.

    `when` may be a date or a datetime; an aware datetime yields aware
    results in the same zone. No timezone lookup is performed, so pass a
    datetime already localized to the place if local clock times are wanted.
    Omitting `when` asks `clock` for the current time.

    Raises ValueError for coordinates outside the valid range.
    """
    location = GeoCoordinate(latitude, longitude)
    if when is None:
        when = clock()

    declination = solar_declination(day_of_year(when))

    def offset(altitude: float) -> float:
        return hour_angle(latitude, declination, altitude) * MINUTES_PER_DEGREE

    longitude_correction = (longitude / 15) * MINUTES_PER_DEGREE
    dhuhr = _shift(_local_noon(when), longitude_correction)

    civil_date = when.date() if isinstance(when, datetime.datetime) else when
    return PrayerTimes(
        fajr=_shift(dhuhr, -offset(FAJR_ALTITUDE)),
        dhuhr=dhuhr,
        asr=_shift(dhuhr, offset(asr_altitude(latitude, declination))),
        maghrib=_shift(dhuhr, offset(MAGHRIB_ALTITUDE)),
        isha=_shift(dhuhr, offset(ISHA_ALTITUDE)),
        location=location,
        date=civil_date,
    )
