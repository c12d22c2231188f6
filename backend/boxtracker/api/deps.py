from typing import Iterator, Optional

from boxtracker.config import settings
from boxtracker.db import SessionLocal
from boxtracker.repositories.base import InventoryRepository
from boxtracker.repositories.memory_repo import MemoryInventoryRepository
from boxtracker.repositories.sql_repo import SqlInventoryRepository

MEMORY = "memory"
DATABASE = "database"

# chosen once per process, from settings read at import time
STORAGE_BACKEND = settings.STORAGE_BACKEND.lower()
if STORAGE_BACKEND not in (MEMORY, DATABASE):
    raise RuntimeError(f"Unknown STORAGE_BACKEND {settings.STORAGE_BACKEND!r}")

_memory_repo: Optional[MemoryInventoryRepository] = None


def memory_repo() -> MemoryInventoryRepository:
    global _memory_repo
    if _memory_repo is None:
        _memory_repo = MemoryInventoryRepository()
    return _memory_repo


def open_repo() -> InventoryRepository:
    """Repository outside a request (scheduler jobs, scripts). Caller closes it."""
    if STORAGE_BACKEND == MEMORY:
        return memory_repo()
    return SqlInventoryRepository(SessionLocal())


def get_repo() -> Iterator[InventoryRepository]:
    if STORAGE_BACKEND == MEMORY:
        yield memory_repo()
        return
    db = SessionLocal()
    try:
        yield SqlInventoryRepository(db)
    finally:
        db.close()
