"""Optional pruning of old day buckets."""
from __future__ import annotations

from typing import List, Optional

from core.logging_setup import get_logger
from core.settings import PLANNER
from helpers.date_keys import shift_date_key, today_key
from services.day_notes import note_key
from services.task_store import TaskStore


logger = get_logger("tasks")


def prune_task_buckets(tasks: TaskStore, keep_days: Optional[int] = None) -> List[str]:
    """Drop buckets (and their notes) older than the last ``keep_days`` days.

    ``keep_days <= 0`` keeps everything. Returns the removed date keys.
    """

    days = PLANNER.retention_days if keep_days is None else keep_days
    if days <= 0:
        return []

    cutoff = shift_date_key(today_key(tasks.clock), -(days - 1))
    removed = []
    for key in tasks.bucket_keys():
        if key < cutoff:
            tasks.drop_bucket(key, note_key(key))
            removed.append(key)
    if removed:
        logger.info("Pruned %d day buckets older than %s", len(removed), cutoff)
    return removed


__all__ = ["prune_task_buckets"]
