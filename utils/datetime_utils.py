"""UTC instants and the RFC3339 strings stored in ``createdAt`` and planner items."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

UTC = timezone.utc

_FRACTION = re.compile(r"\.(\d+)")


def parse_rfc3339(value: Optional[str]) -> Optional[datetime]:
    """Read a stored timestamp as an aware UTC datetime; ``None`` when unreadable."""

    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"
    # fromisoformat on 3.10 only takes 3 or 6 fractional digits.
    text = _FRACTION.sub(lambda m: "." + (m.group(1) + "000000")[:6], text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return ensure_utc(parsed)


def to_rfc3339_utc(dt: datetime) -> str:
    """``createdAt`` format: UTC, millisecond precision, ``Z`` suffix."""
    return ensure_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def ensure_utc(dt: datetime) -> datetime:
    # Naive values are taken as UTC.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def utc_now() -> datetime:
    return datetime.now(UTC)


def epoch_millis(dt: datetime) -> int:
    return int(ensure_utc(dt).timestamp() * 1000)


__all__ = [
    "UTC",
    "ensure_utc",
    "epoch_millis",
    "parse_rfc3339",
    "to_rfc3339_utc",
    "utc_now",
]
