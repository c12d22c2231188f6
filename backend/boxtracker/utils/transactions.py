from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session


@contextmanager
def unit_of_work(session: Session) -> Iterator[Session]:
    """
    Commit everything done on the session inside the block, or roll it all
    back if the block raises.
    Usage:
        with unit_of_work(db):
            ... box write + activity insert ...
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
