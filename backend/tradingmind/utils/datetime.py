"""
Calendar date helpers for check-ins and daily records.

Dates travel as "YYYY-MM-DD" strings, which sort lexicographically in
calendar order. "Today" is the server-local date unless a timezone is
configured.
"""

import re
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

import pytz

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def local_today(tz_name: Optional[str] = None) -> date:
    """Current calendar date, in tz_name when given, else server-local."""
    if tz_name:
        return datetime.now(pytz.timezone(tz_name)).date()
    return date.today()


def to_date_str(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def is_date_str(value: str) -> bool:
    """Shape check only: matches YYYY-MM-DD, impossible dates pass."""
    return bool(value) and bool(DATE_PATTERN.match(value))


def parse_date_str(value: str) -> Optional[date]:
    """Parse YYYY-MM-DD into a date, None for wrong shape or impossible dates."""
    if not is_date_str(value):
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def previous_day(value: date) -> date:
    """Exactly one calendar day back, rolling over months and years."""
    return value - timedelta(days=1)


def month_range(year: int, month: int) -> Tuple[str, str]:
    """
    Inclusive lexicographic bounds for a month: (YYYY-MM-01, YYYY-MM-31).

    The upper bound is always day 31. Shorter months have no stored dates
    above their real length, so the fixed ceiling selects exactly that month.
    """
    prefix = f"{year:04d}-{month:02d}"
    return f"{prefix}-01", f"{prefix}-31"
