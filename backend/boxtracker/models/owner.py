from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from boxtracker.db import Base


class Owner(Base):
    __tablename__ = "owners"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(128), nullable=False)
    color = Column(String(16), nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    def __repr__(self):
        return f"<Owner name={self.name} color={self.color}>"
