# sholat/exceptions.py

import datetime
from typing import Optional


class PrayerTimeError(Exception):
    """Base class for every error raised by the prayer time core."""


class ValidationError(PrayerTimeError, ValueError):
    """Malformed or out-of-range coordinate, date or parameter input. Never retried."""


class DomainError(PrayerTimeError):
    """
    The hour-angle equation has no solution for the requested depression angle
    (polar day or polar night at this latitude and date).
    """

    def __init__(self, message: str, prayer=None, latitude: Optional[float] = None,
                 date: Optional[datetime.date] = None):
        super().__init__(message)
        self.prayer = prayer
        self.latitude = latitude
        self.date = date

    def with_context(self, prayer, latitude: float, date: datetime.date) -> "DomainError":
        """Returns a copy of this error naming the prayer and date it was raised for."""
        name = prayer.display_name if prayer is not None else "schedule"
        return DomainError(
            f"{name} is undefined at latitude {latitude} on {date.isoformat()}: {self}",
            prayer=prayer,
            latitude=latitude,
            date=date,
        )


class CityNotFoundError(PrayerTimeError, LookupError):
    """No gazetteer entry matches the requested city name."""


class CacheError(PrayerTimeError):
    """Backing store unavailable or write failed. Always recovered locally."""
