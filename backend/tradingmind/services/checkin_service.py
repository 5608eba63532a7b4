"""
Check-in service: records daily check-ins and derives statistics.

Statistics are recomputed from stored records on every request; see
tradingmind.domain.checkin for the counting and streak rules.
"""

from datetime import date
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session
from loguru import logger

from tradingmind.config import settings
from tradingmind.db.models import CheckIn
from tradingmind.db.repositories import CheckInRepository
from tradingmind.domain.checkin import CheckInKind, CheckInStats, partition_counts, summarize
from tradingmind.utils.datetime import local_today, parse_date_str, to_date_str
from tradingmind.utils.errors import InvalidDateError, InvalidKindError, MissingFieldError, ValidationError


def _default_today() -> date:
    return local_today(settings.timezone)


def serialize_checkin(record: CheckIn) -> Dict[str, Any]:
    return {
        "id": record.id,
        "date": record.date,
        "type": record.kind,
        "isCompleted": record.is_completed,
        "incompleteTasks": list(record.incomplete_tasks or []),
        "note": record.note or "",
    }


def _clean_tasks(tasks: Optional[List[Dict[str, Any]]]) -> List[Dict[str, str]]:
    cleaned = []
    for task in tasks or []:
        cleaned.append({
            "title": str(task.get("title") or ""),
            "content": str(task.get("content") or ""),
        })
    return cleaned


class CheckInService:
    """Check-in operations for one database session."""

    def __init__(self, db: Session, today: Callable[[], date] = _default_today):
        self.db = db
        self.checkins = CheckInRepository(db)
        self._today = today

    def today(self) -> date:
        return self._today()

    def record_check_in(
        self,
        user_id: int,
        kind: Optional[str],
        tasks: Optional[List[Dict[str, Any]]] = None,
        note: Optional[str] = None,
        date_str: Optional[str] = None,
    ) -> CheckIn:
        """
        Store one check-in for date_str (today when omitted).

        Raises InvalidKindError for unknown kinds, InvalidDateError for
        malformed or impossible dates, DuplicateCheckInError if the user
        already checked in that day.
        """
        if not kind:
            raise MissingFieldError("Check-in type is required (completed or incomplete)")
        if kind not in CheckInKind.values():
            raise InvalidKindError("Check-in type must be 'completed' or 'incomplete'")

        if date_str:
            parsed = parse_date_str(date_str)
            if parsed is None:
                raise InvalidDateError("Date must be a real calendar date in YYYY-MM-DD format")
            checkin_date = to_date_str(parsed)
        else:
            checkin_date = to_date_str(self.today())

        record = self.checkins.create(
            user_id=user_id,
            date=checkin_date,
            kind=kind,
            incomplete_tasks=_clean_tasks(tasks),
            note=note or "",
        )
        self.db.commit()
        logger.info(f"User {user_id} checked in for {checkin_date} ({kind})")
        return record

    def list_month(
        self,
        user_id: int,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Records for one month (current month by default) with partition counts."""
        today = self.today()
        year = today.year if year is None else year
        month = today.month if month is None else month
        if not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12")

        records = self.checkins.get_for_month(user_id, year, month)
        counts = partition_counts(records)
        return {
            "year": year,
            "month": month,
            "total": counts.total,
            "completedCount": counts.completed,
            "incompleteCount": counts.incomplete,
            "records": [serialize_checkin(r) for r in records],
        }

    def today_status(self, user_id: int) -> Dict[str, Any]:
        record = self.checkins.get_for_date(user_id, to_date_str(self.today()))
        return {
            "hasCheckedIn": record is not None,
            "record": serialize_checkin(record) if record else None,
        }

    def compute_stats(self, user_id: int) -> CheckInStats:
        """Current-month counts, all-time counts and the running streak."""
        today = self.today()
        monthly = self.checkins.get_for_month(user_id, today.year, today.month)
        history = self.checkins.get_all(user_id)
        return summarize(monthly, history, today)
