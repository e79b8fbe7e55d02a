"""Sun position for a calendar date: declination and equation of time.

All angles in degrees unless otherwise noted.
"""

import datetime
import math

from .domain import SolarParameters

J2000 = 2451545.0


def dsin(deg: float) -> float:
    return math.sin(math.radians(deg))


def dcos(deg: float) -> float:
    return math.cos(math.radians(deg))


def dtan(deg: float) -> float:
    return math.tan(math.radians(deg))


def darcsin(x: float) -> float:
    return math.degrees(math.asin(x))


def darccos(x: float) -> float:
    return math.degrees(math.acos(x))


def darctan2(y: float, x: float) -> float:
    return math.degrees(math.atan2(y, x))


def darccot(x: float) -> float:
    return math.degrees(math.atan(1.0 / x))


def fix_angle(angle: float) -> float:
    """Normalize angle to the 0-360 degree range."""
    return angle - 360.0 * math.floor(angle / 360.0)


def normalize_hour(hour: float) -> float:
    """Map any real hour value into [0, 24)."""
    return hour - 24.0 * math.floor(hour / 24.0)


def julian_day(year: int, month: int, day: int) -> float:
    """Julian Day at 0h UT of a Gregorian calendar date."""
    if month <= 2:
        year -= 1
        month += 12
    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)
    return math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1)) + day + b - 1524.5


def solar_parameters(date: datetime.date) -> SolarParameters:
    """Solar declination and equation of time for the given date."""
    d = julian_day(date.year, date.month, date.day) - J2000

    g = fix_angle(357.529 + 0.98560028 * d)
    q = fix_angle(280.459 + 0.98564736 * d)
    ecliptic_longitude = fix_angle(q + 1.915 * dsin(g) + 0.020 * dsin(2 * g))
    obliquity = 23.439 - 0.00000036 * d

    declination = darcsin(dsin(obliquity) * dsin(ecliptic_longitude))
    right_ascension = normalize_hour(
        darctan2(dcos(obliquity) * dsin(ecliptic_longitude), dcos(ecliptic_longitude)) / 15.0
    )

    # q and RA wrap at different moments near the vernal point
    equation_of_time = normalize_hour(q / 15.0 - right_ascension + 12.0) - 12.0

    return SolarParameters(
        declination=declination,
        equation_of_time_minutes=equation_of_time * 60.0,
    )
