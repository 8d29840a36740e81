"""
Local-date helpers.

Dates are stored as plain YYYY-MM-DD strings and must never pass through a
UTC conversion on their way in or out, otherwise a late-evening timestamp
shifts the calendar day.
"""

import re
from datetime import date, datetime, time
from typing import Optional, Union

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_local_date(value: str) -> Union[date, datetime]:
    """Parse a YYYY-MM-DD string as a calendar date; anything else as an ISO timestamp."""
    if _DATE_ONLY.match(value):
        year, month, day = (int(part) for part in value.split("-"))
        return date(year, month, day)
    # fromisoformat does not accept a trailing "Z" before 3.11
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def format_local_date(value: Union[date, datetime]) -> str:
    """Format as YYYY-MM-DD using the value's own (local) calendar fields."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def as_date(value: Union[str, date, datetime]) -> date:
    if isinstance(value, str):
        value = parse_local_date(value)
    if isinstance(value, datetime):
        return value.date()
    return value


def format_short_date(value: Union[str, date]) -> str:
    """Jan 5"""
    d = as_date(value)
    return f"{d:%b} {d.day}"


def format_weekend_range(start: Union[str, date], end: Union[str, date]) -> str:
    """Jan 9 - Jan 11"""
    return f"{format_short_date(start)} - {format_short_date(end)}"


def format_clock_time(value: Union[str, time]) -> str:
    """HH:MM (24h) -> 3:30 PM"""
    if isinstance(value, str):
        hours, minutes = (int(part) for part in value.split(":")[:2])
        value = time(hours, minutes)
    hour12 = value.hour % 12 or 12
    suffix = "PM" if value.hour >= 12 else "AM"
    return f"{hour12}:{value.minute:02d} {suffix}"


def format_event_date(event_date: Union[str, date], event_time: Optional[str] = None) -> str:
    """Mon, Jan 5 or Mon, Jan 5 at 3:30 PM"""
    d = as_date(event_date)
    formatted = f"{d:%a}, {d:%b} {d.day}"
    if event_time:
        formatted += f" at {format_clock_time(event_time)}"
    return formatted
