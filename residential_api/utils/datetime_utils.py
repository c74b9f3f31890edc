from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from residential_api.config import get_config

# Community local time (APP_TIMEZONE). Documents are stored in UTC.
LOCAL_TZ = ZoneInfo(get_config().APP_TIMEZONE)


def get_now_utc() -> datetime:
    """Get current datetime in UTC"""
    return datetime.now(timezone.utc)


def get_now_local() -> datetime:
    """Get current datetime in community local time"""
    return datetime.now(LOCAL_TZ)


def to_utc(dt: datetime) -> datetime:
    """
    Convert an aware datetime to UTC or localize a naive one as UTC.

    MongoDB hands datetimes back naive (UTC), so values read from the
    database go through here before being compared with get_now_utc().
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def date_to_datetime(d: date) -> datetime:
    """Midnight UTC for a calendar date (BSON has no date-only type)"""
    return datetime.combine(d, time.min, tzinfo=timezone.utc)


def local_day_bounds(day: Optional[date] = None) -> Tuple[datetime, datetime]:
    """[start, end) of a local calendar day, expressed in UTC."""
    day = day or get_now_local().date()
    start = datetime.combine(day, time.min, tzinfo=LOCAL_TZ)
    end = start + timedelta(days=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def parse_local_datetime(dt_str: str) -> datetime:
    """
    Parse an ISO datetime string; naive values are taken as community local time.
    Always returns a UTC-aware datetime.

    Raises:
        ValueError: if the string is not ISO formatted
    """
    if not dt_str:
        raise ValueError("Empty datetime string")
    dt = datetime.fromisoformat(dt_str.strip().replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=LOCAL_TZ)
    return dt.astimezone(timezone.utc)
