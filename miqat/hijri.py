"""Approximate Gregorian to Hijri date conversion."""

import datetime
from dataclasses import dataclass

HIJRI_MONTHS = (
    "Muharram",
    "Safar",
    "Rabi' al-awwal",
    "Rabi' al-thani",
    "Jumada al-awwal",
    "Jumada al-thani",
    "Rajab",
    "Sha'ban",
    "Ramadan",
    "Shawwal",
    "Dhu al-Qi'dah",
    "Dhu al-Hijjah",
)

# Alternating 30/29 day months, 354 days per cycle
MONTH_LENGTHS = (30, 29, 30, 29, 30, 29, 30, 29, 30, 29, 30, 29)

# Approximate 1 Muharram 1 AH (proleptic Gregorian)
HIJRI_EPOCH = datetime.date(622, 7, 16)

# Mean lunar year of 354.367 days, kept as a ratio so the year arithmetic is exact
_YEAR_NUM = 354367
_YEAR_DEN = 1000


@dataclass(frozen=True)
class HijriDate:
    day: int
    month: int
    year: int
    month_name: str

    def __str__(self) -> str:
        return format_hijri(self)


def _civil_date(when) -> datetime.date:
    if isinstance(when, datetime.datetime):
        return when.date()
    return when


def gregorian_to_hijri(when) -> HijriDate:
    """
    Convert a Gregorian date (or the civil date of a datetime) to its
    approximate Hijri date.

    Raises ValueError for dates before the Hijri epoch.
    """
    days = (_civil_date(when) - HIJRI_EPOCH).days
    if days < 0:
        raise ValueError(f"{when} is before the Hijri epoch {HIJRI_EPOCH}")

    year = days * _YEAR_DEN // _YEAR_NUM + 1
    # first whole day that falls inside this mean year
    year_start = -(-(year - 1) * _YEAR_NUM // _YEAR_DEN)
    day = days - year_start + 1

    for month, length in enumerate(MONTH_LENGTHS, start=1):
        if day <= length:
            break
        day -= length
    else:
        # 355th day of a long year belongs to Dhu al-Hijjah
        day += MONTH_LENGTHS[-1]

    day = max(1, min(day, 30))
    month = max(1, min(month, 12))
    return HijriDate(day=day, month=month, year=year, month_name=HIJRI_MONTHS[month - 1])


def format_hijri(hijri: HijriDate) -> str:
    """Render as '{day} {month_name} {year} AH'."""
    return f"{hijri.day} {hijri.month_name} {hijri.year} AH"


def hijri_date_string(when=None, clock=datetime.datetime.now) -> str:
    if when is None:
        when = clock()
    return format_hijri(gregorian_to_hijri(when))
