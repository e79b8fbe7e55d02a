import datetime

from ...exceptions import ValidationError
from .domain import PrayerKind, PrayerSchedule, PrayerStatus

ONE_DAY = datetime.timedelta(days=1)


def format_duration(duration: datetime.timedelta) -> str:
    """Renders a remaining time as "2 jam 5 menit"; seconds are dropped."""
    total_minutes = int(duration.total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours} jam {minutes} menit"


def _seconds_of_day(value: datetime.time) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


def classify_current_prayer(schedule: PrayerSchedule, now: datetime.time) -> PrayerStatus:
    """
    Which prayer window `now` falls in and how long until the next one starts.

    A prayer becomes current at its own minute. Between Isha and the next Fajr,
    on either side of midnight, Isha is current and Fajr is next.
    """
    if not isinstance(now, datetime.time):
        raise ValidationError(f"now must be a datetime.time, got {now!r}")

    current = None
    upcoming = None
    for kind in PrayerKind.ordered():
        if schedule.time_of(kind) <= now:
            current = kind
        elif upcoming is None:
            upcoming = kind

    if current is None or upcoming is None:
        # before Fajr or after Isha
        current, upcoming = PrayerKind.ISHA, PrayerKind.FAJR

    remaining = datetime.timedelta(
        seconds=_seconds_of_day(schedule.time_of(upcoming)) - _seconds_of_day(now)
    )
    if remaining < datetime.timedelta(0):
        remaining += ONE_DAY
    return PrayerStatus(current=current, next=upcoming, remaining=remaining)
