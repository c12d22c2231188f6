from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import sessionmaker

from boxtracker.db import init_db, make_engine
from boxtracker.repositories.memory_repo import MemoryInventoryRepository
from boxtracker.repositories.sql_repo import SqlInventoryRepository


class StepClock:
    """Deterministic clock: each call moves forward by `step` (zero = frozen)."""

    def __init__(self, start=None, step=timedelta(seconds=1)):
        self.now = start or datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self):
        self.now = self.now + self.step
        return self.now


@pytest.fixture(params=["memory", "sql"])
def make_repo(request):
    """Factory for a fresh, isolated repository of each backend."""
    engines = []
    sessions = []

    def _make(clock=None):
        clock = clock or StepClock()
        if request.param == "memory":
            return MemoryInventoryRepository(clock=clock)
        engine = make_engine("sqlite://")
        init_db(reset=True, bind=engine)
        db = sessionmaker(bind=engine, autoflush=False)()
        engines.append(engine)
        sessions.append(db)
        return SqlInventoryRepository(db, clock=clock)

    yield _make

    for db in sessions:
        db.close()
    for engine in engines:
        engine.dispose()


@pytest.fixture
def repo(make_repo):
    return make_repo()
