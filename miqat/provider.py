"""Interchangeable sources of Hijri dates and prayer times."""

import abc
import datetime

from miqat import hijri, next_prayer, prayer_api, prayer_calc
from miqat.prayer_calc import MECCA, GeoCoordinate


class PrayerTimesProvider(abc.ABC):
    """The three engine operations, independent of where results come from."""

    @abc.abstractmethod
    def gregorian_to_hijri(self, when) -> hijri.HijriDate:
        ...

    @abc.abstractmethod
    def calculate_prayer_times(self, location: GeoCoordinate, when) -> prayer_calc.PrayerTimes:
        ...

    def get_next_prayer(self, times: prayer_calc.PrayerTimes, now: datetime.datetime) -> next_prayer.NextPrayer:
        def calculate(lat, lon, when):
            return self.calculate_prayer_times(GeoCoordinate(lat, lon), when)

        return next_prayer.get_next_prayer(times, now, calculate=calculate)


class LocalProvider(PrayerTimesProvider):
    """Offline trigonometric engine; the reference implementation."""

    def gregorian_to_hijri(self, when) -> hijri.HijriDate:
        return hijri.gregorian_to_hijri(when)

    def calculate_prayer_times(self, location: GeoCoordinate = MECCA, when=None) -> prayer_calc.PrayerTimes:
        return prayer_calc.calculate_prayer_times(location.latitude, location.longitude, when)


class AladhanProvider(PrayerTimesProvider):
    """Remote Aladhan web API. Network failures propagate to the caller."""

    def __init__(self, method: int = prayer_api.DEFAULT_METHOD):
        self.method = method

    def gregorian_to_hijri(self, when) -> hijri.HijriDate:
        if isinstance(when, datetime.datetime):
            when = when.date()
        return prayer_api.fetch_hijri_date(when)

    def calculate_prayer_times(self, location: GeoCoordinate = MECCA, when=None) -> prayer_calc.PrayerTimes:
        if when is None:
            when = datetime.datetime.now()
        tz = None
        if isinstance(when, datetime.datetime):
            tz = when.tzinfo
            when = when.date()
        return prayer_api.fetch_prayer_times(
            location.latitude, location.longitude, when, method=self.method, tz=tz
        )


PROVIDERS = {
    "local": LocalProvider,
    "aladhan": AladhanProvider,
}


def get_provider(name: str) -> PrayerTimesProvider:
    try:
        return PROVIDERS[name]()
    except KeyError:
        raise ValueError(f"unknown provider {name!r}, expected one of {sorted(PROVIDERS)}") from None
