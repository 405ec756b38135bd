"""
Timezone-aware datetime utilities.

Timestamps are kept timezone-aware and in UTC everywhere outside of calendar
arithmetic. Calendar arithmetic happens on local dates of an IANA zone.
"""

import calendar
from datetime import date, datetime, time, timezone
from typing import Optional
from zoneinfo import ZoneInfo

# UTC timezone constant
UTC = timezone.utc

# Weekday numbering used by recurrence rules: 1=Sunday ... 7=Saturday
SUNDAY = 1
SATURDAY = 7
WEEKDAY_ABBREVIATIONS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def now_utc() -> datetime:
    """
    Get current UTC datetime (timezone-aware).

    Returns:
        datetime: Current UTC time with tzinfo set to UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure datetime is timezone-aware and in UTC.

    Args:
        dt: datetime to convert (can be None, naive, or timezone-aware)

    Returns:
        Optional[datetime]: UTC timezone-aware datetime, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=UTC)

    # Already timezone-aware - convert to UTC
    return dt.astimezone(UTC)


def to_local_date(dt: datetime, tz: ZoneInfo) -> date:
    """Calendar date of an instant as seen in the given zone."""
    return ensure_utc(dt).astimezone(tz).date()


def sunday_based_weekday(day: date) -> int:
    """
    Weekday number with Sunday first.

    Example:
        >>> sunday_based_weekday(date(2025, 1, 5))  # Sunday
        1
        >>> sunday_based_weekday(date(2025, 1, 11))  # Saturday
        7
    """
    return day.isoweekday() % 7 + 1


def add_months(day: date, months: int) -> date:
    """
    Add calendar months, clamping the day to the target month's length.

    Example:
        >>> add_months(date(2025, 1, 31), 1)
        date(2025, 2, 28)
    """
    month_index = day.year * 12 + day.month - 1 + months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def add_years(day: date, years: int) -> date:
    """Add calendar years; Feb 29 becomes Feb 28 in non-leap years."""
    return add_months(day, years * 12)


def with_day_of_month(day: date, day_of_month: int) -> date:
    """Move to the given day within the same month, clamped to the month's length."""
    last_day = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=min(day_of_month, last_day))


def combine_local(day: date, at: time, tz: ZoneInfo) -> datetime:
    """
    Localize a wall-clock date and time in the zone and return it in UTC.

    Wall times skipped by a DST transition resolve forward by the size of the
    gap (02:30 on a spring-forward night becomes 03:30). Repeated wall times
    resolve to their first occurrence.
    """
    local = datetime.combine(day, at).replace(tzinfo=tz)
    return local.astimezone(UTC)
