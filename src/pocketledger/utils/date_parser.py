"""Date parsing utilities."""

from calendar import monthrange
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports ISO-ish absolute dates ("2024-01-15", "January 15, 2024") and a
    few relative forms ("today", "yesterday", "this month", "last month").

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def month_range(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a calendar month.

    Args:
        year: Four digit year
        month: Month number, 1-12

    Raises:
        ValueError: If month is out of range
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    last_day = monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def current_month_range(today: Optional[date] = None) -> tuple[date, date]:
    """Return the first and last day of the month containing ``today``."""
    today = today or date.today()
    return month_range(today.year, today.month)


def resolve_month_range(
    year: Optional[int] = None, month: Optional[int] = None
) -> tuple[date, date]:
    """Resolve an optional year/month pair to a date range.

    Both values must be given together; when neither is given the current
    calendar month is used.
    """
    if year is None and month is None:
        return current_month_range()
    if year is None or month is None:
        raise ValueError("Year and month must be given together")
    return month_range(year, month)
