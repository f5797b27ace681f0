# planner/storage/db.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from sqlmodel import SQLModel, Session, create_engine

from core.settings import DB_PATH

# Ensure SQLModel metadata is populated
import models.kv_entry  # noqa: F401


_engine = None


def get_engine(db_path: Optional[Path] = None):
    """Return (and lazily create) the SQLite engine for the planner database."""

    global _engine
    if db_path is not None:
        target = Path(db_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        return create_engine(f"sqlite:///{target.as_posix()}", echo=False)
    if _engine is None:
        DB_PATH.parent.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(f"sqlite:///{DB_PATH.as_posix()}", echo=False)
    return _engine


def init_db(engine=None) -> None:
    actual_engine = engine or get_engine()
    SQLModel.metadata.create_all(actual_engine)


def get_session() -> Session:
    return Session(get_engine())


__all__ = ["get_engine", "get_session", "init_db"]
