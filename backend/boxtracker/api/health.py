from fastapi import APIRouter
from sqlalchemy import text

from boxtracker.api.deps import DATABASE, STORAGE_BACKEND
from boxtracker.db import engine

router = APIRouter()


@router.get("/health", tags=["health"])
def health():
    db_ok = None
    if STORAGE_BACKEND == DATABASE:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
                db_ok = True
        except Exception:
            db_ok = False

    return {
        "status": "degraded" if db_ok is False else "ok",
        "backend": STORAGE_BACKEND,
        "db": db_ok,
    }
