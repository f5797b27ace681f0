from __future__ import annotations

from core.settings import PLANNER
from helpers.date_keys import is_valid_date_key
from storage.ports import KeyValueStore


def note_key(date_key: str) -> str:
    return f"{PLANNER.notes_prefix}{date_key}"


def load_note(store: KeyValueStore, date_key: str) -> str:
    if not is_valid_date_key(date_key):
        return ""
    value = store.load(note_key(date_key), "")
    return value if isinstance(value, str) else ""


def save_note(store: KeyValueStore, date_key: str, text: str) -> bool:
    if not is_valid_date_key(date_key):
        return False
    return store.save(note_key(date_key), text if isinstance(text, str) else "")


__all__ = ["load_note", "note_key", "save_note"]
