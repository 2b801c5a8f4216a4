"""Time helpers shared by models, services and the reminder planner.

All timestamps are handled as timezone-aware UTC datetimes. SQLite drops
tzinfo on the way back, so values loaded from the database go through
``as_utc`` before any comparison.
"""

from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO-8601 string (or pass a datetime through) into aware UTC."""
    if isinstance(value, datetime):
        return as_utc(value)
    return as_utc(datetime.fromisoformat(value))


def resolve_timezone(name: str | None) -> tzinfo:
    """Map a configured zone name to a tzinfo; empty or 'UTC' means UTC."""
    if not name or name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def same_calendar_day(left: datetime, right: datetime, tz: tzinfo) -> bool:
    """True when both instants fall on the same date as seen from ``tz``."""
    return left.astimezone(tz).date() == right.astimezone(tz).date()
