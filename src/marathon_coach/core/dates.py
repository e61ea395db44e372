"""
Calendar date helpers.

All cross-component dates travel as canonical "YYYY-MM-DD" strings.
Arithmetic is done on ``datetime.date`` values only, so there is no
time-of-day component and daylight-saving transitions cannot shift a
day count.
"""

import re
from datetime import date, datetime, timedelta

from .config import DAY_COLUMNS
from .errors import FormatError

DATE_FORMAT = "%Y-%m-%d"
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def format_date(d: date) -> str:
    """Format a date as zero-padded YYYY-MM-DD from its own calendar fields."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def parse_date(date_str: str) -> date:
    """
    Parse a canonical YYYY-MM-DD string.

    Args:
        date_str: Date string to parse

    Returns:
        The calendar date

    Raises:
        FormatError: If the pattern does not match or a component is out of range
    """
    if not isinstance(date_str, str) or not _DATE_RE.match(date_str):
        raise FormatError(f"Invalid date format: {date_str!r}. Expected YYYY-MM-DD")
    try:
        return datetime.strptime(date_str, DATE_FORMAT).date()
    except ValueError as e:
        raise FormatError(f"Invalid date: {date_str}") from e


def is_valid_date(date_str: str) -> bool:
    """True if date_str is a canonical, in-range date string."""
    try:
        parse_date(date_str)
    except FormatError:
        return False
    return True


def next_monday_on_or_after(d: date) -> date:
    """
    Return the next Monday strictly after the week start.

    A Monday maps to the Monday seven days later (start next week, not
    today); any other day maps to the soonest following Monday.
    """
    days_ahead = (7 - d.weekday()) % 7
    if days_ahead == 0:
        days_ahead = 7
    return d + timedelta(days=days_ahead)


def days_between(start: date, end: date) -> int:
    """Whole calendar days from start to end (negative if end is earlier)."""
    return (end - start).days


def weekday_name(d: date) -> str:
    """Three-letter day label (Mon..Sun) for a date."""
    return DAY_COLUMNS[d.weekday()]


def is_monday(d: date) -> bool:
    return d.weekday() == 0


def today() -> date:
    """Local calendar date."""
    return date.today()
