import datetime

from ..exceptions import ValidationError


def utc_now():
    """Naive UTC datetime; every stored and compared timestamp uses this clock."""
    return datetime.datetime.utcnow()


def local_now(timezone_offset, now_utc=None):
    """
    Wall-clock datetime at a fixed UTC offset (hours east).
    Returns a naive datetime, matching the naive times in a schedule.
    """
    now_utc = now_utc or utc_now()
    return now_utc + datetime.timedelta(hours=timezone_offset)


def local_today(timezone_offset, now_utc=None):
    return local_now(timezone_offset, now_utc).date()


def parse_date_str(date_str):
    """
    Parses a YYYY-MM-DD string into a datetime.date.
    Raises ValidationError if the string is not a valid calendar date.
    """
    try:
        return datetime.datetime.strptime(date_str.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError):
        raise ValidationError(f"invalid date format, use YYYY-MM-DD: {date_str!r}") from None