"""UTC helpers: all stored timestamps are UTC."""
from datetime import datetime
from typing import Optional

import pytz


def utcnow() -> datetime:
    return datetime.now(pytz.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (SQLite drops tzinfo) or convert aware ones."""
    if value is None:
        return None
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)


def to_local(value: datetime, tz_name: str) -> datetime:
    """Convert a UTC timestamp to the given IANA timezone."""
    return ensure_utc(value).astimezone(pytz.timezone(tz_name))


def is_valid_timezone(tz_name: str) -> bool:
    return tz_name in pytz.all_timezones_set
