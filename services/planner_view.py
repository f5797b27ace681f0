"""Flat list of date-stamped planner items and its rolling-window views."""
from __future__ import annotations

from datetime import timedelta
from typing import Dict, List, Optional

from core.logging_setup import get_logger
from core.settings import PLANNER
from helpers.date_keys import date_key_to_instant, is_valid_date_key, to_date_key, today_key
from helpers.week_window import Reference, week_window
from models.planner_item import PlannerItem
from models.task_item import new_task_id, normalize_title
from storage.ports import KeyValueStore
from utils.clock import Clock, SYSTEM_CLOCK


logger = get_logger("view")


class PlannerItemRepository:
    def __init__(self, store: KeyValueStore, clock: Clock = SYSTEM_CLOCK, key: str = PLANNER.items_key):
        self.store = store
        self.clock = clock
        self.key = key

    def list_items(self) -> List[PlannerItem]:
        raw = self.store.load(self.key, [])
        if not isinstance(raw, list):
            logger.warning("Planner list under %s is not a list; treating as empty", self.key)
            return []
        items = []
        for record in raw:
            item = PlannerItem.from_dict(record)
            if item is not None:
                items.append(item)
        return items

    def _write(self, items: List[PlannerItem]) -> bool:
        return self.store.save(self.key, [item.to_dict() for item in items])

    def add_item(
        self,
        title: str,
        date: str,
        *,
        note: Optional[str] = None,
        type: Optional[str] = None,
    ) -> Optional[PlannerItem]:
        cleaned = normalize_title(title)
        if not cleaned or not isinstance(date, str) or not date.strip():
            return None
        item = PlannerItem(
            id=new_task_id(self.clock.now()),
            title=cleaned,
            date=date.strip(),
            note=note,
            type=type,
        )
        items = self.list_items()
        items.append(item)
        return item if self._write(items) else None

    def set_done(self, item_id: str, done: bool = True) -> Optional[PlannerItem]:
        items = self.list_items()
        for item in items:
            if item.id == item_id:
                item.done = bool(done)
                return item if self._write(items) else None
        return None

    def remove_item(self, item_id: str) -> bool:
        items = self.list_items()
        remaining = [item for item in items if item.id != item_id]
        if len(remaining) == len(items):
            return True
        return self._write(remaining)

    # ---------- views ----------
    def cutoff(self, days: int = PLANNER.window_days):
        """Civil midnight of the first day of an ``days``-long window ending today."""
        span = max(1, int(days))
        today = date_key_to_instant(today_key(self.clock))
        return today - timedelta(days=span - 1)

    def items_within_days(self, days: int = PLANNER.window_days) -> List[PlannerItem]:
        cutoff = self.cutoff(days)
        result = []
        for item in self.list_items():
            instant = item.instant()
            if instant is not None and instant >= cutoff:
                result.append(item)
        return result

    def items_for_week(self, reference: Reference = None) -> Dict[str, List[PlannerItem]]:
        window = week_window(reference if reference is not None else self.clock.now())
        grouped: Dict[str, List[PlannerItem]] = {key: [] for key in window.days}
        for item in self.list_items():
            day = item.date if is_valid_date_key(item.date) else None
            if day is None:
                instant = item.instant()
                day = to_date_key(instant) if instant is not None else None
            if day in grouped:
                grouped[day].append(item)
        return grouped


__all__ = ["PlannerItemRepository"]
