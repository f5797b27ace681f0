"""SQLModel table backing the key-value persistence surface."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from utils.datetime_utils import utc_now


class KeyValueEntry(SQLModel, table=True):
    __tablename__ = "kv_entry"

    key: str = Field(primary_key=True, description="Namespaced key, e.g. planner/tasks/2024-05-15")
    value_json: Optional[str] = None
    updated_at: datetime = Field(default_factory=utc_now)


__all__ = ["KeyValueEntry"]
