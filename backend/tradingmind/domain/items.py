"""
Titled text items (trading plans, homework) and their ordered container.

Items live inside a parent row as a JSON list. ItemMap loads that list into
an ordered map keyed by a stable generated id so single items can be
looked up, updated and removed explicitly, then dumps it back.
"""

import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional


def new_item_id() -> str:
    return uuid.uuid4().hex


def clean_title(title: Optional[str]) -> str:
    return (title or "").strip()


@dataclass
class TitledItem:
    title: str
    content: str = ""
    id: str = field(default_factory=new_item_id)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TitledItem":
        return cls(
            id=data.get("id") or new_item_id(),
            title=data.get("title") or "",
            content=data.get("content") or "",
        )

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "title": self.title, "content": self.content}


class ItemMap:
    """Ordered id -> TitledItem map with explicit add/update/remove."""

    def __init__(self, items: Iterable[TitledItem] = ()):
        self._items: "OrderedDict[str, TitledItem]" = OrderedDict()
        for item in items:
            self._items[item.id] = item

    @classmethod
    def load(cls, raw: Optional[List[Dict[str, Any]]]) -> "ItemMap":
        return cls(TitledItem.from_dict(entry) for entry in (raw or []))

    @classmethod
    def from_titles(cls, entries: Iterable[Dict[str, Any]]) -> "ItemMap":
        """
        Build fresh items from client-supplied {title, content} entries.

        Titles are trimmed and entries whose title ends up empty are dropped.
        Every entry receives a new id.
        """
        items = []
        for entry in entries:
            title = clean_title(entry.get("title"))
            if title:
                items.append(TitledItem(title=title, content=(entry.get("content") or "").strip()))
        return cls(items)

    def dump(self) -> List[Dict[str, str]]:
        return [item.to_dict() for item in self._items.values()]

    def get(self, item_id: str) -> Optional[TitledItem]:
        return self._items.get(item_id)

    def add(self, title: str, content: str = "") -> TitledItem:
        item = TitledItem(title=title, content=content)
        self._items[item.id] = item
        return item

    def update(self, item_id: str, title: str, content: str = "") -> Optional[TitledItem]:
        item = self._items.get(item_id)
        if item is None:
            return None
        item.title = title
        item.content = content
        return item

    def remove(self, item_id: str) -> bool:
        return self._items.pop(item_id, None) is not None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[TitledItem]:
        return iter(self._items.values())

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items
