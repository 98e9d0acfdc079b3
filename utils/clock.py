"""
Clock helpers.

All persisted instants are epoch milliseconds (UTC). The application clock
can be frozen through settings.FAKE_DATE for demos and manual testing.
"""
from datetime import datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

MS_PER_DAY = 24 * 60 * 60 * 1000


def get_current_date(fake_date: Optional[str] = None) -> datetime:
    """
    Get the current instant as an aware UTC datetime.

    Args:
        fake_date: ISO datetime overriding the real clock. Defaults to
            settings.FAKE_DATE. Naive values are read as UTC.
    """
    if fake_date is None:
        from config import settings
        fake_date = settings.FAKE_DATE

    if fake_date:
        fixed = datetime.fromisoformat(fake_date)
        if fixed.tzinfo is None:
            fixed = fixed.replace(tzinfo=timezone.utc)
        return fixed.astimezone(timezone.utc)

    return datetime.now(timezone.utc)


def to_timestamp_ms(value: datetime) -> int:
    """Convert an aware datetime to epoch milliseconds."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def from_timestamp_ms(value: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def get_next_occurrence_of_hour_in_timezone(
    from_date: datetime,
    days_to_add: int,
    hour: int,
    tz_name: str,
) -> datetime:
    """
    Get hour:00 local time, days_to_add days after from_date's local date.

    Example: noon in the cron timezone, 4 days from now:
        get_next_occurrence_of_hour_in_timezone(get_current_date(), 4, 12, "Europe/Paris")

    Args:
        from_date: Starting instant (aware, or naive UTC)
        days_to_add: Number of days to add to the local date
        hour: Hour to set (0-23)
        tz_name: IANA timezone (e.g. "Europe/Paris")

    Returns:
        Aware datetime in UTC
    """
    tz = ZoneInfo(tz_name)
    if from_date.tzinfo is None:
        from_date = from_date.replace(tzinfo=timezone.utc)

    local_date = from_date.astimezone(tz).date() + timedelta(days=days_to_add)
    target = datetime.combine(local_date, time(hour=hour), tzinfo=tz)
    return target.astimezone(timezone.utc)


def local_midnight_ms(value: datetime, tz_name: str) -> int:
    """Start of value's local day in tz_name, as epoch milliseconds."""
    return to_timestamp_ms(get_next_occurrence_of_hour_in_timezone(value, 0, 0, tz_name))
