"""SQLite key-value store for planner buckets and lists."""
from __future__ import annotations

import json
from typing import Any, Callable, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from core.logging_setup import get_logger
from models.kv_entry import KeyValueEntry
from storage.db import get_session
from utils.datetime_utils import utc_now


logger = get_logger("storage")


def _serialise(value: Any) -> Optional[str]:
    try:
        return json.dumps(value, ensure_ascii=False, sort_keys=True)
    except (TypeError, ValueError):
        return None


def _deserialise(payload: Optional[str], default: Any, key: str) -> Any:
    if payload is None or not payload.strip():
        return default
    try:
        return json.loads(payload)
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed payload stored under %s", key)
        return default


class SqliteKeyValueStore:
    """High level helper around the ``kv_entry`` table."""

    def __init__(self, session_factory: Callable[[], Session] = get_session):
        self._session_factory = session_factory

    def load(self, key: str, default: Any = None) -> Any:
        try:
            with self._session_factory() as session:
                row = session.get(KeyValueEntry, key)
                payload = row.value_json if row else None
        except SQLAlchemyError as exc:
            logger.warning("Failed to read %s: %s", key, exc)
            return default
        return _deserialise(payload, default, key)

    def save(self, key: str, value: Any) -> bool:
        payload = _serialise(value)
        if payload is None:
            logger.warning("Refusing to store non-JSON value under %s", key)
            return False
        try:
            with self._session_factory() as session:
                row = session.get(KeyValueEntry, key)
                if row is None:
                    row = KeyValueEntry(key=key, value_json=payload, updated_at=utc_now())
                else:
                    row.value_json = payload
                    row.updated_at = utc_now()
                session.add(row)
                session.commit()
        except SQLAlchemyError as exc:
            logger.warning("Failed to write %s: %s", key, exc)
            return False
        return True

    def save_raw(self, key: str, payload: str) -> None:
        """Store ``payload`` verbatim; only meant for repair and tests."""
        with self._session_factory() as session:
            row = session.get(KeyValueEntry, key) or KeyValueEntry(key=key)
            row.value_json = payload
            row.updated_at = utc_now()
            session.add(row)
            session.commit()

    def remove(self, key: str) -> None:
        try:
            with self._session_factory() as session:
                row = session.get(KeyValueEntry, key)
                if row is not None:
                    session.delete(row)
                    session.commit()
        except SQLAlchemyError as exc:
            logger.warning("Failed to remove %s: %s", key, exc)

    def keys(self, prefix: str = "") -> Iterable[str]:
        try:
            with self._session_factory() as session:
                stmt = select(KeyValueEntry.key).order_by(KeyValueEntry.key)
                if prefix:
                    stmt = stmt.where(KeyValueEntry.key.startswith(prefix, autoescape=True))
                result: List[str] = list(session.exec(stmt))
        except SQLAlchemyError as exc:
            logger.warning("Failed to list keys with prefix %r: %s", prefix, exc)
            return []
        return result


__all__ = ["SqliteKeyValueStore"]
