"""Monday-anchored week windows and Portuguese day labels."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple, Union

from helpers.date_keys import format_date_key, parse_date_key, to_date_key

# date.weekday(): Monday == 0
WEEKDAY_ABBREV = ("Seg", "Ter", "Qua", "Qui", "Sex", "Sáb", "Dom")
WEEKDAY_LONG = (
    "segunda-feira",
    "terça-feira",
    "quarta-feira",
    "quinta-feira",
    "sexta-feira",
    "sábado",
    "domingo",
)
MONTH_LONG = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)

Reference = Union[datetime, date, str, None]


@dataclass(frozen=True)
class WeekWindow:
    monday_key: Optional[str]
    days: List[str] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.days


@dataclass(frozen=True)
class WeekLabel:
    key: str
    short_label: str
    chip_label: str
    long_label: str

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "shortLabel": self.short_label,
            "chipLabel": self.chip_label,
            "longLabel": self.long_label,
        }


def _reference_day(reference: Reference) -> Optional[date]:
    if isinstance(reference, datetime):
        return parse_date_key(to_date_key(reference))
    if isinstance(reference, date):
        return reference
    return parse_date_key(reference)


def chip_label(day: date) -> str:
    return f"{WEEKDAY_ABBREV[day.weekday()]} {day.day:02d}"


def long_label(day: date) -> str:
    return f"{WEEKDAY_LONG[day.weekday()]}, {day.day:02d} de {MONTH_LONG[day.month - 1]}"


def week_window(reference: Reference) -> WeekWindow:
    """Return the Monday..Sunday window containing ``reference``.

    ``reference`` may be an instant (converted to its UTC-3 day), a ``date`` or
    a date key. Unparseable input yields an empty window.
    """

    day = _reference_day(reference)
    if day is None:
        return WeekWindow(monday_key=None)

    monday = day - timedelta(days=day.weekday())
    dates = [monday + timedelta(days=offset) for offset in range(7)]
    return WeekWindow(
        monday_key=format_date_key(monday),
        days=[format_date_key(d) for d in dates],
        labels=[chip_label(d) for d in dates],
    )


def week_start_key(key: str) -> str:
    """Snap ``key`` to the Monday of its week; invalid keys pass through."""

    day = parse_date_key(key)
    if day is None:
        return key
    return format_date_key(day - timedelta(days=day.weekday()))


def resolve_week_start(raw_key: str, *, strict: bool = False) -> str:
    """Resolve the week start a caller asked for.

    By default the key is returned unchanged, so callers may anchor a "week" on
    any day. ``strict=True`` snaps to the Monday of that key's week.
    """

    if strict:
        return week_start_key(raw_key)
    return raw_key


def build_week_labels(start_key: str) -> Tuple[str, List[WeekLabel]]:
    """Seven labels starting at ``start_key`` (no snapping); ``[]`` if invalid."""

    start = parse_date_key(start_key)
    if start is None:
        return start_key, []

    labels = []
    for offset in range(7):
        day = start + timedelta(days=offset)
        chip = chip_label(day)
        labels.append(
            WeekLabel(
                key=format_date_key(day),
                short_label=chip,
                chip_label=chip,
                long_label=long_label(day),
            )
        )
    return format_date_key(start), labels


def week_labels_payload(raw_week_start: Optional[str], *, strict: bool = False) -> Optional[dict]:
    """Body of the ``weekStart`` lookup, or ``None`` when the request is invalid."""

    if raw_week_start is None or not str(raw_week_start).strip():
        return None
    resolved = resolve_week_start(str(raw_week_start).strip(), strict=strict)
    start_key, labels = build_week_labels(resolved)
    if not labels:
        return None
    return {
        "weekStartKey": start_key,
        "weekLabels": [label.to_dict() for label in labels],
    }


__all__ = [
    "WeekLabel",
    "WeekWindow",
    "WEEKDAY_ABBREV",
    "build_week_labels",
    "chip_label",
    "long_label",
    "resolve_week_start",
    "week_labels_payload",
    "week_start_key",
    "week_window",
]
