from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from boxtracker.db import Base


class Box(Base):
    __tablename__ = "boxes"
    __table_args__ = {"sqlite_autoincrement": True}  # ids are never reused

    id = Column(Integer, primary_key=True, autoincrement=True)
    box_number = Column(Integer, nullable=False, index=True)
    owner = Column(String(128), nullable=False, index=True)
    room = Column(String(128), nullable=False)
    contents = Column(Text, nullable=False)
    status = Column(
        String(32), nullable=False, default="packed"
    )  # packed, staging, loaded, out, delivered, unpacked
    position = Column(
        JSON(none_as_null=True), nullable=True
    )  # {"depth", "horizontal", "vertical"} or NULL
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    qr_codes = relationship(
        "QrCode", back_populates="box", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Box #{self.box_number} id={self.id} status={self.status}>"
