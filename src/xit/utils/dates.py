"""
Calendar helpers for due-date periods.

Pure functions, no external dependencies. Out-of-range month and week
numbers roll over into the following period the way a lenient calendar
does (month 13 of 2024 is January 2025).
"""

from datetime import date, datetime, timedelta
from typing import Callable, Optional

Clock = Callable[[], datetime]


def today(clock: Optional[Clock] = None) -> date:
    """
    Return the current local date.

    Args:
        clock: Optional callable returning the current datetime (for tests)

    Returns:
        Start-of-day date for the clock's "now"
    """
    now = clock() if clock is not None else datetime.now()
    return now.date() if isinstance(now, datetime) else now


def end_of_month(year: int, month: int) -> date:
    """Last calendar day of the given month, normalising the month number."""
    # Month index of the following month, counted from year 0
    following = year * 12 + month
    next_year, next_month = divmod(following, 12)
    return date(next_year, next_month + 1, 1) - timedelta(days=1)


def end_of_quarter(year: int, quarter: int) -> date:
    """Last calendar day of the quarter's final month."""
    return end_of_month(year, quarter * 3)


def end_of_year(year: int) -> date:
    return date(year, 12, 31)


def end_of_iso_week(year: int, week: int) -> date:
    """
    Saturday of the given ISO week.

    Week numbers past the last week of the ISO year continue into the next
    year instead of raising.
    """
    monday = date.fromisocalendar(year, 1, 1) + timedelta(weeks=week - 1)
    return monday + timedelta(days=5)
