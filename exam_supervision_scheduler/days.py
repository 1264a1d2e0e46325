"""
Exam-day enumeration and date helpers.

The exam period is an inclusive range of calendar days; each day becomes one
morning and one evening distribution run.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence, Union

from .config import ENGLISH_WEEKDAYS
from .errors import InvalidDateRange
from .log import get_logger
from .models import ExamDay

log = get_logger(__name__)

DateLike = Union[str, date, None]

_ISO_RE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})$')
_DMY_RE = re.compile(r'^(\d{2})/(\d{2})/(\d{4})$')


def parse_date(value: DateLike) -> date:
    """
    Parse an ISO ``YYYY-MM-DD`` string (or pass a date through).

    Raises:
        InvalidDateRange: if the value is missing or malformed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise InvalidDateRange(f"Missing date: {value!r}")
    text = value.strip()
    if not _ISO_RE.match(text):
        raise InvalidDateRange(f"Invalid date format: {value!r}, expected YYYY-MM-DD")
    try:
        return datetime.strptime(text, '%Y-%m-%d').date()
    except ValueError as e:
        raise InvalidDateRange(f"Invalid date value: {value!r}") from e


def format_date(day: date) -> str:
    """Format as ``DD/MM/YYYY``."""
    return day.strftime('%d/%m/%Y')


def weekday_name(day: date, weekday_names: Sequence[str] = ENGLISH_WEEKDAYS) -> str:
    return weekday_names[day.weekday()]


def generate_days(start: DateLike, end: DateLike,
                  weekday_names: Sequence[str] = ENGLISH_WEEKDAYS) -> List[ExamDay]:
    """
    List every calendar day from ``start`` to ``end``, both included.

    Missing or malformed dates give an empty list instead of an error, as does
    an end date before the start date.
    """
    try:
        first = parse_date(start)
        last = parse_date(end)
    except InvalidDateRange as e:
        log.warning("invalid_date_range", start=str(start), end=str(end), reason=str(e))
        return []

    days = []
    current = first
    while current <= last:
        days.append(ExamDay(weekday=weekday_name(current, weekday_names), date=current))
        current += timedelta(days=1)
    return days


def find_day(days: Sequence[ExamDay], key: str) -> Optional[ExamDay]:
    for day in days:
        if day.key == key:
            return day
    return None


def convert_to_iso_date(value: str) -> str:
    """``DD/MM/YYYY`` -> ``YYYY-MM-DD``; empty string if malformed or not a real day."""
    if not value or not _DMY_RE.match(value.strip()):
        return ''
    try:
        return datetime.strptime(value.strip(), '%d/%m/%Y').strftime('%Y-%m-%d')
    except ValueError:
        return ''


def convert_from_iso_date(value: str) -> str:
    """``YYYY-MM-DD`` -> ``DD/MM/YYYY``; empty string if malformed or not a real day."""
    if not value or not _ISO_RE.match(value.strip()):
        return ''
    try:
        return datetime.strptime(value.strip(), '%Y-%m-%d').strftime('%d/%m/%Y')
    except ValueError:
        return ''
