import importlib
import os

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from boxtracker.config import settings
from boxtracker.utils.log_setup import get_logger

log = get_logger("db")

Base = declarative_base()

# add new model modules here so metadata is populated before create_all
MODEL_MODULES = [
    "boxtracker.models.box",
    "boxtracker.models.activity",
    "boxtracker.models.owner",
    "boxtracker.models.qr_code",
]


def make_engine(url: str) -> Engine:
    """
    Build an engine for `url`. SQLite gets thread sharing (FastAPI runs sync
    routes in a threadpool) and, for ":memory:" style URLs, a single shared
    connection so every session sees the same database.
    """
    kwargs = {"future": True, "echo": False}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    eng = create_engine(url, **kwargs)
    if eng.dialect.name == "sqlite":
        event.listen(eng, "connect", _enable_sqlite_fks)
    return eng


def _enable_sqlite_fks(dbapi_conn, _record):
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys=ON")
    cur.close()


DATABASE_URL = settings.DATABASE_URL
engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def import_models():
    for mod in MODEL_MODULES:
        importlib.import_module(mod)


def init_db(reset: bool = False, bind: Engine = None):
    """
    Initialize DB schema.

    Behavior:
      - If `reset` is passed or RESET_DB is 1/true/yes, drop & recreate tables.
      - Otherwise, leave existing tables in place.
    """
    bind = bind or engine
    env_reset = os.environ.get("RESET_DB", "false").lower() in ("1", "true", "yes")

    import_models()

    if reset or env_reset:
        log.info("Resetting database tables")
        Base.metadata.drop_all(bind=bind)

    Base.metadata.create_all(bind=bind)
    log.info("Database initialized (%s)", bind.url.render_as_string(hide_password=True))


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
