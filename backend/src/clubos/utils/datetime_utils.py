"""
Date and time helpers for the HH:MM / YYYY-MM-DD API boundary
"""

import re
from datetime import date, datetime, time
from typing import Optional, Union

from clubos.exceptions import InvalidInput

DATE_PATTERN = re.compile(r"\A[0-9]{4}-[0-9]{2}-[0-9]{2}\Z")
TIME_PATTERN = re.compile(r"\A[0-9]{2}:[0-9]{2}\Z")


def parse_date(value: Union[str, date], field: str = "date") -> date:
    """Parse a YYYY-MM-DD string into a date, raising InvalidInput on bad shape or calendar date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise InvalidInput(f"Invalid {field} format. Use YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidInput(f"Invalid {field}: {value}")


def parse_time(value: Union[str, time], field: str = "time") -> time:
    """Parse an HH:MM string into a time, raising InvalidInput on bad shape or range"""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    if not isinstance(value, str) or not TIME_PATTERN.match(value):
        raise InvalidInput(f"Invalid {field} format. Use HH:MM")
    hours, minutes = int(value[:2]), int(value[3:])
    if hours > 23 or minutes > 59:
        raise InvalidInput(f"Invalid {field}: {value}")
    return time(hours, minutes)


def format_time(value: Optional[Union[str, time]]) -> Optional[str]:
    """
    Normalize a stored time to HH:MM.

    The store may carry seconds (or microseconds); the API boundary is
    minute-granular, so everything past the minute is truncated.
    """
    if value is None:
        return None
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return str(value)[:5]


def day_of_week(value: date) -> int:
    """Day of week with 0=Sunday ... 6=Saturday, matching booking_slots.day_of_week"""
    return (value.weekday() + 1) % 7


def utc_today() -> date:
    return datetime.utcnow().date()
