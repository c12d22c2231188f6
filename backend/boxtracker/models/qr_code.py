from datetime import datetime, timezone

from boxtracker.db import Base
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship


class QrCode(Base):
    __tablename__ = "qr_codes"
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True, autoincrement=True)
    box_id = Column(
        Integer, ForeignKey("boxes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    data = Column(String(64), nullable=False)  # boxtracker-{box_id}
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    box = relationship("Box", back_populates="qr_codes")
