"""Snooze targets for day-filed tasks."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.settings import PLANNER
from helpers.date_keys import is_valid_date_key, shift_date_key


@dataclass(frozen=True)
class SnoozeResult:
    days: int
    snooze_until: str


def clamp_days(days: object) -> int:
    """At least one day; non-integers fall back to the default."""
    if isinstance(days, bool):
        return PLANNER.default_snooze_days
    try:
        value = int(days)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return PLANNER.default_snooze_days
    return max(1, value)


def snooze_until(date_key: str, days: object = 1) -> Optional[SnoozeResult]:
    if not is_valid_date_key(date_key):
        return None
    amount = clamp_days(days)
    return SnoozeResult(days=amount, snooze_until=shift_date_key(date_key, amount))


__all__ = ["SnoozeResult", "clamp_days", "snooze_until"]
