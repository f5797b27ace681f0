"""Ordering and grouping of a day's tasks for display."""
from __future__ import annotations

from typing import Dict, Iterable, List

from core.task_kinds import GROUP_ORDER, group_for_kind
from models.task_item import STATUS_ACTIVE, STATUS_SNOOZED, TaskItem
from utils.datetime_utils import parse_rfc3339

_EPOCH_SORT = 0.0


def _status_rank(task: TaskItem) -> int:
    if task.status == STATUS_ACTIVE:
        return 0
    if task.status == STATUS_SNOOZED:
        return 1
    return 2


def _created_ts(task: TaskItem) -> float:
    created = parse_rfc3339(task.created_at)
    return created.timestamp() if created else _EPOCH_SORT


def sort_for_group(tasks: Iterable[TaskItem]) -> List[TaskItem]:
    """Active first, then snoozed, then done; oldest first within a status."""
    return sorted(tasks, key=lambda task: (_status_rank(task), _created_ts(task)))


def group_tasks(tasks: Iterable[TaskItem]) -> Dict[str, List[TaskItem]]:
    grouped: Dict[str, List[TaskItem]] = {group: [] for group in GROUP_ORDER}
    for task in tasks:
        grouped[group_for_kind(task.kind)].append(task)
    return {group: sort_for_group(items) for group, items in grouped.items()}


__all__ = ["group_tasks", "sort_for_group"]
