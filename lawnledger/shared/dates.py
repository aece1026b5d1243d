"""
Calendar date helpers.

Job and service dates are plain calendar dates (YYYY-MM-DD). Nothing here
touches time zones: dates are compared and formatted exactly as stored.
"""

import calendar
from datetime import date, timedelta
from typing import Optional, Union

from ..schemas import ServiceFrequency

DateLike = Union[date, str, None]


def parse_calendar_date(value: DateLike) -> Optional[date]:
    """
    Parse a canonical YYYY-MM-DD string into a date.

    Args:
        value: date, ISO date string, or None

    Returns:
        The parsed date, or None for empty input

    Raises:
        ValueError: If the string is not a canonical calendar date
    """
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    text = value.strip()
    if len(text) != 10:
        raise ValueError(f"Invalid calendar date: {value!r} (expected YYYY-MM-DD)")
    return date.fromisoformat(text)


def format_calendar_date(value: Optional[date]) -> str:
    return value.isoformat() if value else ""


def display_date(value: Optional[date]) -> str:
    """Format date for display, e.g. 'Oct 19, 2026'"""
    if not value:
        return "Not set"
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def short_display_date(value: date) -> str:
    """Weekday form used in notifications, e.g. 'Mon, Oct 19'"""
    return f"{value.strftime('%a')}, {value.strftime('%b')} {value.day}"


def add_months(value: date, months: int) -> date:
    """Shift by whole months, clamping to the last day of the target month"""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def next_service_date(last: Optional[date], frequency: ServiceFrequency) -> Optional[date]:
    """Calculate the next service date based on frequency and last service date"""
    if not last:
        return None
    if frequency is ServiceFrequency.WEEKLY:
        return last + timedelta(days=7)
    if frequency is ServiceFrequency.BIWEEKLY:
        return last + timedelta(days=14)
    if frequency is ServiceFrequency.MONTHLY:
        return add_months(last, 1)
    raise ValueError(f"Unknown service frequency: {frequency}")


def days_until(value: Optional[date], today: date) -> Optional[int]:
    if not value:
        return None
    return (value - today).days


def is_overdue(value: Optional[date], today: date) -> bool:
    if not value:
        return False
    return value < today


def sunday_on_or_before(value: date) -> date:
    # date.weekday(): Monday == 0 ... Sunday == 6
    return value - timedelta(days=(value.weekday() + 1) % 7)


def first_of_month(value: date) -> date:
    return value.replace(day=1)
