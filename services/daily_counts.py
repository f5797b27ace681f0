"""Same-day summary counts and a light look-back over recent days."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.logging_setup import get_logger
from core.settings import PLANNER
from helpers.date_keys import is_valid_date_key, shift_date_key, today_key
from models.task_item import STATUS_ACTIVE, STATUS_DONE, STATUS_SNOOZED, TaskItem
from services.task_store import TaskStore


logger = get_logger("tasks")

PRESSURE_HIGH_AT = 6
PRESSURE_MEDIUM_AT = 3


@dataclass(frozen=True)
class DailyCounts:
    saved_today: int = 0
    later_today: int = 0


@dataclass(frozen=True)
class RecentSignal:
    had_tasks_recently: bool = False
    had_completion_recently: bool = False
    pending_pressure: str = "low"


def is_deferred(task: TaskItem, date_key: str) -> bool:
    # Status and pointer can drift apart; either one marks the task as deferred.
    if task.status == STATUS_SNOOZED:
        return True
    return bool(task.snooze_until) and is_valid_date_key(task.snooze_until) and task.snooze_until > date_key


def counts_for_today(store: TaskStore) -> DailyCounts:
    try:
        key = today_key(store.clock)
        tasks = store.list_tasks(key)
        return DailyCounts(
            saved_today=len(tasks),
            later_today=sum(1 for task in tasks if is_deferred(task, key)),
        )
    except Exception:
        logger.exception("Could not compute today's counts")
        return DailyCounts()


def recent_signal(
    store: TaskStore,
    date_key: Optional[str] = None,
    days_back: int = PLANNER.recent_days_back,
) -> RecentSignal:
    """Summarise D-1..D-``days_back`` without writing anything."""

    key = date_key or today_key(store.clock)
    if not is_valid_date_key(key):
        return RecentSignal()

    had_tasks = False
    had_completion = False
    pending = 0
    for offset in range(1, max(1, days_back) + 1):
        tasks = store.list_tasks(shift_date_key(key, -offset))
        if not tasks:
            continue
        had_tasks = True
        for task in tasks:
            if task.status == STATUS_DONE:
                had_completion = True
            elif task.status in (STATUS_ACTIVE, STATUS_SNOOZED):
                pending += 1
        if pending >= PRESSURE_HIGH_AT:
            break

    if pending >= PRESSURE_HIGH_AT:
        pressure = "high"
    elif pending >= PRESSURE_MEDIUM_AT:
        pressure = "medium"
    else:
        pressure = "low"
    return RecentSignal(
        had_tasks_recently=had_tasks,
        had_completion_recently=had_completion,
        pending_pressure=pressure,
    )


__all__ = ["DailyCounts", "RecentSignal", "counts_for_today", "is_deferred", "recent_signal"]
