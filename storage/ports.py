"""Persistence surface consumed by the planner core."""
from __future__ import annotations

from typing import Any, Iterable, Protocol


class KeyValueStore(Protocol):
    """JSON-compatible values addressed by string keys.

    Implementations never raise for missing keys or unreadable payloads;
    ``load`` returns ``default`` instead and ``save`` reports failure as
    ``False``.
    """

    def load(self, key: str, default: Any = None) -> Any:
        ...

    def save(self, key: str, value: Any) -> bool:
        ...

    def remove(self, key: str) -> None:
        ...

    def keys(self, prefix: str = "") -> Iterable[str]:
        ...


__all__ = ["KeyValueStore"]
