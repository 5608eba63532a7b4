"""
User settings: trading principles, homework checklist and plan template.

The settings document is created lazily with default homework and plan
items, and the defaults are written back whenever either list is found
empty on read.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

from sqlalchemy.orm import Session

from tradingmind.db.models import UserSettings
from tradingmind.db.repositories import UserSettingsRepository
from tradingmind.domain.items import ItemMap, TitledItem, clean_title
from tradingmind.utils.errors import ConcurrentCreateError, MissingFieldError, NotFoundError

DEFAULT_HOMEWORK = [
    {"title": "判断情绪周期", "content": "最高连扳数量，涨停个股数量，跌停个股数量"},
    {"title": "判断政策面", "content": ""},
    {"title": "判断板块", "content": ""},
]

DEFAULT_PLANS = [
    {"title": "候选股票", "content": ""},
    {"title": "买点计划", "content": ""},
    {"title": "卖出计划", "content": ""},
]

DEFAULT_PRESET_PRINCIPLES = [{"index": 0, "is_selected": True}]

HOMEWORK = "trading_homework"
PLANS = "trading_plans"

_ITEM_LABELS = {HOMEWORK: "Homework item", PLANS: "Plan item"}

T = TypeVar("T")


def default_items(defaults: Iterable[Dict[str, str]]) -> List[Dict[str, str]]:
    """Fresh default items, each with its own id."""
    return ItemMap.from_titles(defaults).dump()


def serialize_settings(settings: UserSettings) -> Dict[str, Any]:
    return {
        "presetPrinciples": [
            {"index": p["index"], "isSelected": bool(p.get("is_selected"))}
            for p in (settings.preset_principles or [])
        ],
        "customPrinciples": list(settings.custom_principles or []),
        "tradingHomework": list(settings.trading_homework or []),
        "tradingPlans": list(settings.trading_plans or []),
    }


def _clean_principles(principles: Iterable[Optional[str]]) -> List[str]:
    return [p.strip() for p in principles if p and p.strip()]


def _clean_presets(presets: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {"index": int(p["index"]), "is_selected": bool(p.get("is_selected", False))}
        for p in presets
    ]


class SettingsService:
    """CRUD over the per-user settings document."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserSettingsRepository(db)

    def _new(self, user_id: int) -> UserSettings:
        return self.repo.new(
            user_id,
            preset_principles=list(DEFAULT_PRESET_PRINCIPLES),
            custom_principles=[],
            trading_homework=default_items(DEFAULT_HOMEWORK),
            trading_plans=default_items(DEFAULT_PLANS),
        )

    def _save(self, settings: UserSettings) -> UserSettings:
        self.repo.save(settings)
        self.db.commit()
        return settings

    def _upsert(self, user_id: int, mutate: Callable[[UserSettings], T]) -> Tuple[T, UserSettings]:
        """
        Apply mutate to the stored document, creating it with defaults when absent.

        If another request creates the document first, the change is applied
        again on top of the row that request committed.
        """
        settings = self.repo.get(user_id) or self._new(user_id)
        result = mutate(settings)
        try:
            self.repo.save(settings)
        except ConcurrentCreateError:
            settings = self.repo.get(user_id)
            result = mutate(settings)
            self.repo.save(settings)
        self.db.commit()
        return result, settings

    def get(self, user_id: int) -> UserSettings:
        """Load settings, creating them or backfilling empty lists with defaults."""

        def backfill(settings: UserSettings) -> None:
            if not settings.trading_homework:
                settings.trading_homework = default_items(DEFAULT_HOMEWORK)
            if not settings.trading_plans:
                settings.trading_plans = default_items(DEFAULT_PLANS)

        settings = self.repo.get(user_id)
        if settings is not None and settings.trading_homework and settings.trading_plans:
            return settings

        _, settings = self._upsert(user_id, backfill)
        return settings

    def update(
        self,
        user_id: int,
        preset_principles: Optional[List[Dict[str, Any]]] = None,
        custom_principles: Optional[List[str]] = None,
        trading_homework: Optional[List[Dict[str, Any]]] = None,
        trading_plans: Optional[List[Dict[str, Any]]] = None,
    ) -> UserSettings:
        """Partial update: only fields that are given are replaced."""

        def apply(settings: UserSettings) -> None:
            if preset_principles is not None:
                settings.preset_principles = _clean_presets(preset_principles)
            if custom_principles is not None:
                settings.custom_principles = _clean_principles(custom_principles)
            if trading_homework is not None:
                settings.trading_homework = ItemMap.from_titles(trading_homework).dump()
            if trading_plans is not None:
                settings.trading_plans = ItemMap.from_titles(trading_plans).dump()

        _, settings = self._upsert(user_id, apply)
        return settings

    def update_principles(
        self,
        user_id: int,
        preset_principles: Optional[List[Dict[str, Any]]],
        custom_principles: Optional[List[str]],
    ) -> UserSettings:
        return self.update(user_id, preset_principles=preset_principles, custom_principles=custom_principles)

    def replace_items(self, user_id: int, field: str, entries: List[Dict[str, Any]]) -> UserSettings:
        """Replace a whole list; entries with blank titles are dropped."""
        return self.update(user_id, **{field: entries})

    def add_item(self, user_id: int, field: str, title: Optional[str], content: Optional[str]) -> Tuple[TitledItem, UserSettings]:
        title = clean_title(title)
        if not title:
            raise MissingFieldError("Title must not be empty")

        def apply(settings: UserSettings) -> TitledItem:
            items = ItemMap.load(getattr(settings, field))
            item = items.add(title, (content or "").strip())
            setattr(settings, field, items.dump())
            return item

        return self._upsert(user_id, apply)

    def update_item(
        self,
        user_id: int,
        field: str,
        item_id: str,
        title: Optional[str],
        content: Optional[str],
    ) -> Tuple[TitledItem, UserSettings]:
        title = clean_title(title)
        if not title:
            raise MissingFieldError("Title must not be empty")

        settings = self.repo.get(user_id)
        if settings is None:
            raise NotFoundError("Settings not found")

        items = ItemMap.load(getattr(settings, field))
        item = items.update(item_id, title, (content or "").strip())
        if item is None:
            raise NotFoundError(f"{_ITEM_LABELS[field]} not found")

        setattr(settings, field, items.dump())
        self._save(settings)
        return item, settings

    def delete_item(self, user_id: int, field: str, item_id: str) -> UserSettings:
        settings = self.repo.get(user_id)
        if settings is None:
            raise NotFoundError("Settings not found")

        items = ItemMap.load(getattr(settings, field))
        if not items.remove(item_id):
            raise NotFoundError(f"{_ITEM_LABELS[field]} not found")

        setattr(settings, field, items.dump())
        return self._save(settings)
