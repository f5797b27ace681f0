"""Tasks filed under a day bucket."""
from __future__ import annotations

import itertools
import random
import string
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from core.task_kinds import DEFAULT_KIND, normalize_kind
from utils.datetime_utils import epoch_millis, to_rfc3339_utc, utc_now

STATUS_ACTIVE = "active"
STATUS_DONE = "done"
STATUS_SNOOZED = "snoozed"
VALID_STATUSES = (STATUS_ACTIVE, STATUS_DONE, STATUS_SNOOZED)

DEFAULT_SOURCE = "planner"

_counter = itertools.count(1)
_ALPHABET = string.ascii_lowercase + string.digits
_BASE36 = string.digits + string.ascii_lowercase


def _base36(value: int) -> str:
    if value <= 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def new_task_id(now=None) -> str:
    """``<millis base36>-<process counter>-<random suffix>``."""
    millis = epoch_millis(now or utc_now())
    suffix = "".join(random.choices(_ALPHABET, k=6))
    return f"{_base36(millis)}-{next(_counter)}-{suffix}"


def normalize_title(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return " ".join(value.split())


@dataclass
class TaskItem:
    id: str
    title: str
    kind: str = DEFAULT_KIND
    status: str = STATUS_ACTIVE
    snooze_until: Optional[str] = None
    created_at: str = field(default_factory=lambda: to_rfc3339_utc(utc_now()))
    source: str = DEFAULT_SOURCE

    @property
    def done(self) -> bool:
        return self.status == STATUS_DONE

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "kind": self.kind,
            "status": self.status,
            "done": self.done,
            "createdAt": self.created_at,
            "source": self.source,
        }
        if self.snooze_until:
            payload["snoozeUntil"] = self.snooze_until
        return payload

    @classmethod
    def from_dict(cls, raw: Any, *, now=None, fallback_id: Optional[str] = None) -> Optional["TaskItem"]:
        """Build a task from a stored record, tolerating legacy shapes.

        Records without an id take ``fallback_id`` (a fresh id when not given).
        Returns ``None`` for records without a usable title.
        """

        if not isinstance(raw, dict):
            return None
        title = normalize_title(raw.get("title"))
        if not title:
            return None

        status = raw.get("status")
        if status not in VALID_STATUSES:
            status = STATUS_DONE if raw.get("done") is True else STATUS_ACTIVE

        kind = normalize_kind(raw.get("kind") or raw.get("origin"))

        task_id = raw.get("id")
        if not isinstance(task_id, str) or not task_id:
            task_id = fallback_id or new_task_id(now)

        created_at = raw.get("createdAt")
        if not isinstance(created_at, str) or not created_at:
            created_at = to_rfc3339_utc(now or utc_now())

        snooze = raw.get("snoozeUntil")
        source = raw.get("source")
        return cls(
            id=task_id,
            title=title,
            kind=kind,
            status=status,
            snooze_until=snooze if isinstance(snooze, str) and snooze else None,
            created_at=created_at,
            source=source if isinstance(source, str) and source else DEFAULT_SOURCE,
        )


__all__ = [
    "DEFAULT_SOURCE",
    "STATUS_ACTIVE",
    "STATUS_DONE",
    "STATUS_SNOOZED",
    "TaskItem",
    "VALID_STATUSES",
    "new_task_id",
    "normalize_title",
]
