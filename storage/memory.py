"""In-process key-value store, used in tests and for throwaway sessions."""
from __future__ import annotations

import json
from typing import Any, Dict, Iterable


class InMemoryStore:
    def __init__(self, initial: Dict[str, Any] | None = None):
        # Values are kept serialised so callers never share mutable state.
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self._data[key] = json.dumps(value, ensure_ascii=False)
        self.save_calls = 0

    def load(self, key: str, default: Any = None) -> Any:
        payload = self._data.get(key)
        if payload is None:
            return default
        try:
            return json.loads(payload)
        except json.JSONDecodeError:
            return default

    def save(self, key: str, value: Any) -> bool:
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            return False
        self._data[key] = payload
        self.save_calls += 1
        return True

    def save_raw(self, key: str, payload: str) -> None:
        """Store ``payload`` verbatim, bypassing serialisation."""
        self._data[key] = payload

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> Iterable[str]:
        return sorted(k for k in self._data if k.startswith(prefix))

    def __len__(self) -> int:
        return len(self._data)


__all__ = ["InMemoryStore"]
