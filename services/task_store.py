# planner/services/task_store.py
from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from core.logging_setup import get_logger
from core.settings import PLANNER
from core.task_kinds import DEFAULT_KIND, normalize_kind
from helpers.date_keys import is_valid_date_key, today_key
from helpers.snooze import snooze_until
from models.task_item import (
    STATUS_ACTIVE,
    STATUS_DONE,
    STATUS_SNOOZED,
    TaskItem,
    new_task_id,
    normalize_title,
)
from storage.ports import KeyValueStore
from utils.clock import Clock, SYSTEM_CLOCK
from utils.datetime_utils import to_rfc3339_utc


logger = get_logger("tasks")


@dataclass(frozen=True)
class TaskResult:
    ok: bool
    date_key: str
    task_id: Optional[str] = None
    status: Optional[str] = None
    snooze_until: Optional[str] = None
    task: Optional[TaskItem] = None


def bucket_key(date_key: str) -> str:
    return f"{PLANNER.tasks_prefix}{date_key}"


def legacy_task_id(date_key: str, position: int) -> str:
    """Stable id for a stored record that never had one."""
    return f"legacy-{date_key}-{position}"


class _KeyLock:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class TaskStore:
    """Day-bucketed task lists on top of a key-value store.

    Each bucket lives under ``planner/tasks/<dateKey>`` as a JSON array. Every
    mutation loads the bucket, applies the change and saves the whole array
    back while holding the bucket's lock. Records that cannot be read as tasks
    are kept aside and written back after the tasks.
    """

    EVENTS = ("after_create", "after_update", "after_delete")

    def __init__(self, store: KeyValueStore, clock: Clock = SYSTEM_CLOCK):
        self.store = store
        self.clock = clock
        self._locks: Dict[str, _KeyLock] = {}
        self._locks_guard = threading.Lock()
        self._listeners: Dict[str, set] = {event: set() for event in self.EVENTS}

    # ---------- events ----------
    def subscribe(self, event: str, callback: Callable[[str, str], None]) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unsupported event: {event}")
        self._listeners[event].add(callback)

    def unsubscribe(self, event: str, callback) -> None:
        if event not in self._listeners:
            return
        self._listeners[event].discard(callback)

    def _emit(self, event: str, date_key: str, task_id: str) -> None:
        for listener in list(self._listeners.get(event, ())):
            try:
                listener(date_key, task_id)
            except Exception:
                logger.exception("Listener for %s failed on task %s", event, task_id)

    # ---------- bucket io ----------
    @contextmanager
    def _bucket_lock(self, date_key: str) -> Iterator[None]:
        with self._locks_guard:
            entry = self._locks.get(date_key)
            if entry is None:
                entry = self._locks[date_key] = _KeyLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._locks_guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[date_key]

    def _resolve_key(self, date_key: Optional[str]) -> str:
        return date_key if date_key is not None else today_key(self.clock)

    def _read_bucket(self, date_key: str) -> Tuple[List[TaskItem], List[Any]]:
        """Return ``(tasks, unreadable)`` for one bucket."""

        raw = self.store.load(bucket_key(date_key), [])
        if not isinstance(raw, list):
            logger.warning("Bucket %s is not a list; treating as empty", date_key)
            return [], []
        now = self.clock.now()
        tasks: List[TaskItem] = []
        unreadable: List[Any] = []
        for position, record in enumerate(raw):
            task = TaskItem.from_dict(
                record,
                now=now,
                fallback_id=legacy_task_id(date_key, position),
            )
            if task is None:
                unreadable.append(record)
            else:
                tasks.append(task)
        if unreadable:
            logger.warning("Bucket %s holds %d unreadable records", date_key, len(unreadable))
        return tasks, unreadable

    def _write_bucket(self, date_key: str, tasks: List[TaskItem], unreadable: List[Any]) -> bool:
        payload = [task.to_dict() for task in tasks] + list(unreadable)
        saved = self.store.save(bucket_key(date_key), payload)
        if not saved:
            logger.warning("Bucket %s was not persisted", date_key)
        return saved

    # ---------- queries ----------
    def list_tasks(self, date_key: Optional[str] = None) -> List[TaskItem]:
        key = self._resolve_key(date_key)
        if not is_valid_date_key(key):
            return []
        tasks, _ = self._read_bucket(key)
        return tasks

    def get_task(self, task_id: str, date_key: Optional[str] = None) -> Optional[TaskItem]:
        for task in self.list_tasks(date_key):
            if task.id == task_id:
                return task
        return None

    def bucket_keys(self) -> List[str]:
        prefix = PLANNER.tasks_prefix
        keys = [k[len(prefix):] for k in self.store.keys(prefix)]
        return sorted(k for k in keys if is_valid_date_key(k))

    # ---------- commands ----------
    def add_task(self, title: str, kind: str = DEFAULT_KIND, date_key: Optional[str] = None) -> TaskResult:
        key = self._resolve_key(date_key)
        cleaned = normalize_title(title)
        if not is_valid_date_key(key) or not cleaned:
            return TaskResult(ok=False, date_key=key)
        cleaned = cleaned[: PLANNER.max_title_length]
        task_kind = normalize_kind(kind)

        with self._bucket_lock(key):
            tasks, unreadable = self._read_bucket(key)
            now = self.clock.now()
            taken = {task.id for task in tasks}
            task_id = new_task_id(now)
            while task_id in taken:
                task_id = new_task_id(now)

            task = TaskItem(
                id=task_id,
                title=cleaned,
                kind=task_kind,
                status=STATUS_ACTIVE,
                created_at=to_rfc3339_utc(now),
            )
            tasks.append(task)
            if not self._write_bucket(key, tasks, unreadable):
                return TaskResult(ok=False, date_key=key)

        logger.debug("Task %s added to %s", task.id, key)
        self._emit("after_create", key, task.id)
        return TaskResult(ok=True, date_key=key, task_id=task.id, status=task.status, task=task)

    def _mutate(
        self,
        task_id: str,
        date_key: Optional[str],
        change: Callable[[TaskItem, str], bool],
    ) -> TaskResult:
        """Apply ``change`` to one task; ``change`` returns False to skip saving.

        ``after_update`` fires only when the bucket was written.
        """

        key = self._resolve_key(date_key)
        if not is_valid_date_key(key):
            return TaskResult(ok=False, date_key=key, task_id=task_id)

        with self._bucket_lock(key):
            tasks, unreadable = self._read_bucket(key)
            target = next((task for task in tasks if task.id == task_id), None)
            if target is None:
                return TaskResult(ok=False, date_key=key, task_id=task_id)
            changed = change(target, key)
            if changed and not self._write_bucket(key, tasks, unreadable):
                return TaskResult(ok=False, date_key=key, task_id=task_id)

        if changed:
            logger.debug("Task %s in %s is now %s", task_id, key, target.status)
            self._emit("after_update", key, task_id)
        return TaskResult(
            ok=True,
            date_key=key,
            task_id=task_id,
            status=target.status,
            snooze_until=target.snooze_until,
            task=target,
        )

    def toggle_done(self, task_id: str, date_key: Optional[str] = None) -> TaskResult:
        """Flip ``done`` <-> ``active``; a snoozed task goes straight to ``done``."""

        def change(task: TaskItem, _key: str) -> bool:
            task.status = STATUS_ACTIVE if task.status == STATUS_DONE else STATUS_DONE
            task.snooze_until = None
            return True

        return self._mutate(task_id, date_key, change)

    def snooze_task(self, task_id: str, days: object = 1, date_key: Optional[str] = None) -> TaskResult:
        def change(task: TaskItem, key: str) -> bool:
            result = snooze_until(key, days)
            task.status = STATUS_SNOOZED
            task.snooze_until = result.snooze_until if result else None
            return True

        return self._mutate(task_id, date_key, change)

    def unsnooze_task(self, task_id: str, date_key: Optional[str] = None) -> TaskResult:
        def change(task: TaskItem, _key: str) -> bool:
            if task.status != STATUS_SNOOZED and task.snooze_until is None:
                return False
            if task.status == STATUS_SNOOZED:
                task.status = STATUS_ACTIVE
            task.snooze_until = None
            return True

        return self._mutate(task_id, date_key, change)

    def rename_task(self, task_id: str, title: str, date_key: Optional[str] = None) -> TaskResult:
        cleaned = normalize_title(title)[: PLANNER.max_title_length]
        if not cleaned:
            return TaskResult(ok=False, date_key=self._resolve_key(date_key), task_id=task_id)

        def change(task: TaskItem, _key: str) -> bool:
            if task.title == cleaned:
                return False
            task.title = cleaned
            return True

        return self._mutate(task_id, date_key, change)

    def remove_task(self, task_id: str, date_key: Optional[str] = None) -> TaskResult:
        key = self._resolve_key(date_key)
        if not is_valid_date_key(key):
            return TaskResult(ok=False, date_key=key, task_id=task_id)

        with self._bucket_lock(key):
            tasks, unreadable = self._read_bucket(key)
            remaining = [task for task in tasks if task.id != task_id]
            if len(remaining) == len(tasks):
                return TaskResult(ok=True, date_key=key, task_id=task_id)
            if not self._write_bucket(key, remaining, unreadable):
                return TaskResult(ok=False, date_key=key, task_id=task_id)

        logger.debug("Task %s removed from %s", task_id, key)
        self._emit("after_delete", key, task_id)
        return TaskResult(ok=True, date_key=key, task_id=task_id)

    def drop_bucket(self, date_key: str, *extra_keys: str) -> None:
        """Delete a whole bucket (plus ``extra_keys``) under the bucket's lock."""

        with self._bucket_lock(date_key):
            self.store.remove(bucket_key(date_key))
            for key in extra_keys:
                self.store.remove(key)


__all__ = ["TaskResult", "TaskStore", "bucket_key", "legacy_task_id"]
