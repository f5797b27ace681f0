"""Injectable time sources."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol

from utils.datetime_utils import ensure_utc, utc_now


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    def now(self) -> datetime:
        return utc_now()


class FixedClock:
    """Clock frozen at a given instant; ``advance`` moves it forward."""

    def __init__(self, instant: datetime):
        self._instant = ensure_utc(instant)

    def now(self) -> datetime:
        return self._instant

    def advance(self, **delta) -> datetime:
        self._instant = self._instant + timedelta(**delta)
        return self._instant


SYSTEM_CLOCK = SystemClock()


__all__ = ["Clock", "FixedClock", "SystemClock", "SYSTEM_CLOCK"]
