"""
Pure check-in statistics functions.

All functions are deterministic with no side effects: callers pass in the
record set and "today", nothing is read from the clock or the database.
Statistics are derived on demand from the full record history; no running
aggregate is stored anywhere.
"""

from dataclasses import dataclass, asdict
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, Protocol

from tradingmind.utils.datetime import previous_day, to_date_str


class CheckInKind(str, Enum):
    """completed: kept the trading rules that day; incomplete: broke them."""

    COMPLETED = "completed"
    INCOMPLETE = "incomplete"

    @classmethod
    def values(cls) -> list[str]:
        return [kind.value for kind in cls]


class _HasCompletion(Protocol):
    is_completed: bool


@dataclass(frozen=True)
class PartitionCounts:
    total: int = 0
    completed: int = 0
    incomplete: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class CheckInStats:
    monthly: PartitionCounts
    overall: PartitionCounts
    streak: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "monthly": self.monthly.to_dict(),
            "overall": self.overall.to_dict(),
            "streak": self.streak,
        }


def partition_counts(records: Iterable[_HasCompletion]) -> PartitionCounts:
    """Split records into completed and incomplete counts."""
    total = completed = 0
    for record in records:
        total += 1
        if record.is_completed:
            completed += 1
    return PartitionCounts(total=total, completed=completed, incomplete=total - completed)


def compute_streak(checked_in_dates: Iterable[str], today: date) -> int:
    """
    Count consecutive checked-in days ending today, or yesterday as a grace day.

    Any record kind counts as checked in. If neither today nor yesterday has
    a record the streak is 0. Otherwise the walk starts at today when today
    has a record (else yesterday) and steps back one calendar day at a time,
    stopping at the first day without a record.
    """
    dates = set(checked_in_dates)
    if not dates:
        return 0

    yesterday = previous_day(today)
    if to_date_str(today) in dates:
        cursor = today
    elif to_date_str(yesterday) in dates:
        cursor = yesterday
    else:
        return 0

    streak = 0
    while to_date_str(cursor) in dates:
        streak += 1
        cursor = previous_day(cursor)
    return streak


def summarize(
    monthly_records: Iterable[_HasCompletion],
    all_records: Iterable[Any],
    today: date,
) -> CheckInStats:
    """Build monthly/overall counts and the streak from already-fetched records."""
    history = list(all_records)
    return CheckInStats(
        monthly=partition_counts(monthly_records),
        overall=partition_counts(history),
        streak=compute_streak((record.date for record in history), today),
    )
