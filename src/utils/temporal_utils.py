"""
Temporal Utility Functions.

This module provides utility functions for working with epoch-millisecond
timestamps and calendar arithmetic, particularly for recurring transaction
prediction. Month and year arithmetic goes through dateutil's relativedelta
and calendar.monthrange so month lengths and leap years come from the
calendar, not from hand-written tables.
"""

from calendar import monthrange
from datetime import datetime, timezone, tzinfo

from dateutil.relativedelta import relativedelta

MILLIS_IN_DAY = 24 * 60 * 60 * 1000


def from_millis(timestamp_ms: int, tz: tzinfo = timezone.utc) -> datetime:
    """
    Convert milliseconds since epoch to an aware datetime.

    Args:
        timestamp_ms: Milliseconds since 1970-01-01T00:00:00Z
        tz: Zone the resulting datetime is expressed in

    Returns:
        Timezone-aware datetime
    """
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=tz)


def to_millis(dt: datetime) -> int:
    """Convert an aware datetime to milliseconds since epoch."""
    return int(round(dt.timestamp() * 1000))


def days_between(earlier_ms: int, later_ms: int) -> int:
    """Whole days between two timestamps (floor of the millisecond delta)."""
    return (later_ms - earlier_ms) // MILLIS_IN_DAY


def days_in_month(year: int, month: int) -> int:
    """Actual number of days in the given month."""
    return monthrange(year, month)[1]


def add_weeks(dt: datetime, weeks: int) -> datetime:
    """Add calendar weeks (wall-clock, so DST shifts keep the local time)."""
    return dt + relativedelta(weeks=weeks)


def add_months(dt: datetime, months: int) -> datetime:
    """
    Add calendar months.

    When the source day does not exist in the target month, relativedelta
    clamps to the target month's last day (Jan 31 + 1 month -> Feb 28/29).
    """
    return dt + relativedelta(months=months)


def add_years(dt: datetime, years: int) -> datetime:
    """Add calendar years (Feb 29 + 1 year -> Feb 28)."""
    return dt + relativedelta(years=years)


def with_day_clamped(dt: datetime, day: int) -> datetime:
    """
    Move ``dt`` to ``day`` within its month, clamped to the month length.

    Example: day 31 in a 30-day month becomes day 30.
    """
    return dt.replace(day=min(day, days_in_month(dt.year, dt.month)))


def with_last_day_of_month(dt: datetime) -> datetime:
    """Move ``dt`` to the last day of its month, keeping the time of day."""
    return dt.replace(day=days_in_month(dt.year, dt.month))
