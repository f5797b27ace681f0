from datetime import datetime, timezone
import logging
from pathlib import Path
import sys

import pytest
from sqlmodel import Session, SQLModel, create_engine

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import models  # noqa: E402,F401
from services.task_store import TaskStore  # noqa: E402
from storage.memory import InMemoryStore  # noqa: E402
from utils.clock import FixedClock  # noqa: E402


# Wednesday 2024-05-15, 12:00 in UTC-3.
NOON_WEDNESDAY = datetime(2024, 5, 15, 15, 0, tzinfo=timezone.utc)


@pytest.fixture()
def clock():
    return FixedClock(NOON_WEDNESDAY)


@pytest.fixture()
def memory_store():
    return InMemoryStore()


@pytest.fixture()
def tasks(memory_store, clock):
    return TaskStore(memory_store, clock)


@pytest.fixture()
def session_factory():
    engine = create_engine("sqlite:///:memory:")
    SQLModel.metadata.create_all(engine)

    def factory():
        return Session(engine)

    return factory


@pytest.fixture(autouse=True)
def _detach_log_handlers():
    yield
    logger = logging.getLogger("planner")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
