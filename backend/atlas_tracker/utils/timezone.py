from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "UTC"


def get_zone(name: Optional[str] = None) -> ZoneInfo:
    return ZoneInfo(name or DEFAULT_TIMEZONE)


def to_local(dt: datetime, tz: Optional[ZoneInfo] = None) -> datetime:
    """
    Converts a datetime to the given timezone.
    Assumes naive datetimes are UTC.
    """
    if tz is None:
        tz = get_zone()

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(tz)


def calendar_days_between(a: datetime, b: datetime, tz: Optional[ZoneInfo] = None) -> int:
    """
    Whole calendar days between two instants, compared by local date.
    23:59 and 00:01 the next morning are one day apart.
    """
    return abs((to_local(a, tz).date() - to_local(b, tz).date()).days)


def whole_hours_between(earlier: datetime, later: datetime) -> int:
    """Floor of the elapsed hours, never negative."""
    seconds = (to_local(later, timezone.utc) - to_local(earlier, timezone.utc)).total_seconds()
    if seconds <= 0:
        return 0
    return int(seconds // 3600)
