"""Calendar-day keys in the planner's fixed civil timezone (UTC-3).

A date key is a ``YYYY-MM-DD`` string naming one civil day. Keys are derived
from absolute instants with a fixed offset, so the result never depends on the
timezone configured on the host.
"""
from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from core.settings import PLANNER
from utils.clock import Clock, SYSTEM_CLOCK
from utils.datetime_utils import ensure_utc

PLANNER_TZ = timezone(timedelta(hours=PLANNER.utc_offset_hours), "BRT")

_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def to_date_key(instant: datetime) -> str:
    """Return the ``YYYY-MM-DD`` key of ``instant`` in UTC-3.

    Naive datetimes are taken as UTC.
    """

    shifted = ensure_utc(instant) + timedelta(hours=PLANNER.utc_offset_hours)
    return f"{shifted.year:04d}-{shifted.month:02d}-{shifted.day:02d}"


def format_date_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_date_key(value: object) -> Optional[date]:
    """Parse a strict ``YYYY-MM-DD`` key; ``None`` for anything else."""

    if not isinstance(value, str):
        return None
    text = value.strip()
    if not _KEY_RE.match(text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def is_valid_date_key(value: object) -> bool:
    return parse_date_key(value) is not None


def shift_date_key(key: str, days: int) -> str:
    """Move ``key`` by ``days`` calendar days; invalid keys are returned as-is."""

    parsed = parse_date_key(key)
    if parsed is None:
        return key
    return format_date_key(parsed + timedelta(days=days))


def today_key(clock: Optional[Clock] = None) -> str:
    return to_date_key((clock or SYSTEM_CLOCK).now())


def date_key_to_instant(key: str) -> Optional[datetime]:
    """Civil midnight of ``key`` in UTC-3 as an aware datetime."""

    parsed = parse_date_key(key)
    if parsed is None:
        return None
    return datetime.combine(parsed, time.min, tzinfo=PLANNER_TZ)


__all__ = [
    "PLANNER_TZ",
    "date_key_to_instant",
    "format_date_key",
    "is_valid_date_key",
    "parse_date_key",
    "shift_date_key",
    "to_date_key",
    "today_key",
]
