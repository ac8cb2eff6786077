"""Solar geometry helpers shared by the prayer-time calculations."""

import datetime
import math

MINUTES_PER_DEGREE = 4  # the Earth turns 15 degrees per hour

FAJR_ALTITUDE = -18.0
MAGHRIB_ALTITUDE = 0.0
ISHA_ALTITUDE = -17.0


def day_of_year(when) -> int:
    """Ordinal day within the year, 1 for January 1st."""
    if isinstance(when, datetime.datetime):
        when = when.date()
    return when.timetuple().tm_yday


def solar_declination(day: int) -> float:
    """Single-harmonic approximation of the sun's declination, in degrees."""
    return 23.45 * math.sin(math.radians(360.0 * (284 + day) / 365))


def hour_angle(latitude: float, declination: float, altitude: float) -> float:
    """
    Hour angle in degrees at which the sun reaches `altitude`.

    The cosine is clamped to [-1, 1], so polar day and polar night saturate
    at 0 or 180 degrees instead of raising.
    """
    lat = math.radians(latitude)
    dec = math.radians(declination)
    alt = math.radians(altitude)

    numerator = math.sin(alt) - math.sin(lat) * math.sin(dec)
    denominator = math.cos(lat) * math.cos(dec)
    if abs(denominator) < 1e-12:
        # at the poles the ratio is unbounded; saturate by the numerator's sign
        cos_h = math.copysign(1.0, numerator) if numerator else 0.0
    else:
        cos_h = numerator / denominator

    return math.degrees(math.acos(max(-1.0, min(1.0, cos_h))))


def asr_altitude(latitude: float, declination: float) -> float:
    """
    Sun altitude where a shadow equals the object's height plus its noon shadow.

    This is an altitude for hour_angle(), not an hour angle itself; using
    atan(1 + tan z) directly as the hour angle puts Asr after Maghrib at
    higher latitudes in winter.
    """
    noon_zenith = math.radians(abs(latitude - declination))
    return math.degrees(math.atan(1.0 / (1.0 + math.tan(noon_zenith))))
