"""Date-stamped planner entries kept in one flat list."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from helpers.date_keys import date_key_to_instant
from utils.datetime_utils import parse_rfc3339


@dataclass
class PlannerItem:
    id: str
    title: str
    date: str
    done: bool = False
    note: Optional[str] = None
    type: Optional[str] = None

    def instant(self) -> Optional[datetime]:
        """Start of the item's day (date keys) or its exact timestamp."""
        return parse_item_date(self.date)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "date": self.date,
            "done": self.done,
        }
        if self.note is not None:
            payload["note"] = self.note
        if self.type is not None:
            payload["type"] = self.type
        return payload

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["PlannerItem"]:
        if not isinstance(raw, dict):
            return None
        item_id = raw.get("id")
        if not isinstance(item_id, str) or not item_id:
            return None
        date_value = raw.get("date", raw.get("dateKey"))
        note = raw.get("note", raw.get("notes"))
        item_type = raw.get("type")
        return cls(
            id=item_id,
            title=raw.get("title") if isinstance(raw.get("title"), str) else "",
            date=date_value if isinstance(date_value, str) else "",
            done=raw.get("done") is True,
            note=note if isinstance(note, str) else None,
            type=item_type if isinstance(item_type, str) else None,
        )


def parse_item_date(value: object) -> Optional[datetime]:
    if not isinstance(value, str) or not value.strip():
        return None
    instant = date_key_to_instant(value)
    if instant is not None:
        return instant
    # Full timestamps must carry a time component.
    if "T" not in value:
        return None
    return parse_rfc3339(value)


__all__ = ["PlannerItem", "parse_item_date"]
