from datetime import datetime, timezone

from boxtracker.db import Base
from sqlalchemy import Column, DateTime, Integer, String, Text


class Activity(Base):
    __tablename__ = "activities"
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True, autoincrement=True)
    # no FK: the log keeps entries for boxes that were deleted
    box_id = Column(Integer, nullable=True, index=True)
    type = Column(String(32), nullable=False)
    description = Column(Text, nullable=False)
    timestamp = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
