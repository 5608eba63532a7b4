"""Per-date trading plans and reflection."""

from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from sqlalchemy.orm import Session

from tradingmind.db.models import DailyRecord
from tradingmind.db.repositories import DailyRecordRepository
from tradingmind.domain.items import ItemMap, TitledItem, clean_title
from tradingmind.utils.datetime import is_date_str
from tradingmind.utils.errors import ConcurrentCreateError, InvalidDateError, MissingFieldError, NotFoundError

T = TypeVar("T")


def serialize_record(record: DailyRecord, exists: Optional[bool] = None) -> Dict[str, Any]:
    data = {
        "date": record.date,
        "tradingPlans": list(record.trading_plans or []),
        "reflection": record.reflection or "",
    }
    if exists is not None:
        data["exists"] = exists
    return data


def _check_date(date: str) -> None:
    if not is_date_str(date):
        raise InvalidDateError("Date must be in YYYY-MM-DD format")


class DailyRecordService:
    """Upsert-and-mutate operations on one user's daily records."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = DailyRecordRepository(db)

    def _save(self, record: DailyRecord) -> DailyRecord:
        self.repo.save(record)
        self.db.commit()
        return record

    def _upsert(self, user_id: int, date: str, mutate: Callable[[DailyRecord], T]) -> Tuple[T, DailyRecord]:
        """
        Apply mutate to the stored record, creating it when absent.

        If another request inserts the same record first, the change is
        applied again on top of the row that request committed.
        """
        record = self.repo.get_or_new(user_id, date)
        result = mutate(record)
        try:
            self.repo.save(record)
        except ConcurrentCreateError:
            record = self.repo.get(user_id, date)
            result = mutate(record)
            self.repo.save(record)
        self.db.commit()
        return result, record

    def get(self, user_id: int, date: str) -> Dict[str, Any]:
        """Stored record, or an empty one marked exists=False. Never writes."""
        _check_date(date)
        record = self.repo.get(user_id, date)
        if record is None:
            return {"date": date, "tradingPlans": [], "reflection": "", "exists": False}
        return serialize_record(record, exists=True)

    def save(
        self,
        user_id: int,
        date: str,
        trading_plans: Optional[List[Dict[str, Any]]] = None,
        reflection: Optional[str] = None,
    ) -> DailyRecord:
        """Replace plans and/or reflection, creating the record when absent."""
        _check_date(date)

        def apply(record: DailyRecord) -> None:
            if trading_plans is not None:
                record.trading_plans = ItemMap.from_titles(trading_plans).dump()
            if reflection is not None:
                record.reflection = reflection.strip()

        _, record = self._upsert(user_id, date, apply)
        return record

    def add_plan(self, user_id: int, date: str, title: Optional[str], content: Optional[str]) -> Tuple[TitledItem, DailyRecord]:
        _check_date(date)
        title = clean_title(title)
        if not title:
            raise MissingFieldError("Title must not be empty")

        def apply(record: DailyRecord) -> TitledItem:
            plans = ItemMap.load(record.trading_plans)
            item = plans.add(title, (content or "").strip())
            record.trading_plans = plans.dump()
            return item

        return self._upsert(user_id, date, apply)

    def update_plan(
        self,
        user_id: int,
        date: str,
        item_id: str,
        title: Optional[str],
        content: Optional[str],
    ) -> Tuple[TitledItem, DailyRecord]:
        title = clean_title(title)
        if not title:
            raise MissingFieldError("Title must not be empty")

        record = self.repo.get(user_id, date)
        if record is None:
            raise NotFoundError("Daily record not found")

        plans = ItemMap.load(record.trading_plans)
        item = plans.update(item_id, title, (content or "").strip())
        if item is None:
            raise NotFoundError("Plan item not found")

        record.trading_plans = plans.dump()
        self._save(record)
        return item, record

    def delete_plan(self, user_id: int, date: str, item_id: str) -> DailyRecord:
        record = self.repo.get(user_id, date)
        if record is None:
            raise NotFoundError("Daily record not found")

        plans = ItemMap.load(record.trading_plans)
        if not plans.remove(item_id):
            raise NotFoundError("Plan item not found")

        record.trading_plans = plans.dump()
        return self._save(record)

    def save_reflection(self, user_id: int, date: str, reflection: Optional[str]) -> DailyRecord:
        _check_date(date)

        def apply(record: DailyRecord) -> None:
            record.reflection = (reflection or "").strip()

        _, record = self._upsert(user_id, date, apply)
        return record
