# backend/boxtracker/schemas/box_schema.py
import enum
from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BoxStatus(str, enum.Enum):
    PACKED = "packed"
    STAGING = "staging"
    LOADED = "loaded"
    OUT = "out"
    DELIVERED = "delivered"
    UNPACKED = "unpacked"


# signed 64-bit column range; ids outside it can never have been stored
DB_INT_MIN = -(2**63)
DB_INT_MAX = 2**63 - 1


class BoxPosition(BaseModel):
    """One of the 27 cells of the truck-loading grid."""

    model_config = ConfigDict(frozen=True)
    depth: Literal["front", "middle", "back"]
    horizontal: Literal["left", "center", "right"]
    vertical: Literal["low", "mid", "high"]

    def code(self) -> str:
        return f"{self.depth}-{self.horizontal}-{self.vertical}"


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; everything we store is UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class BoxCreate(BaseModel):
    box_number: int = Field(..., ge=DB_INT_MIN, le=DB_INT_MAX)
    owner: str = Field(..., min_length=1)
    room: str = Field(..., min_length=1)
    contents: str
    # left as a plain string: unknown values are coerced by the store
    status: Optional[str] = None


class BoxUpdate(BaseModel):
    box_number: Optional[int] = Field(None, ge=DB_INT_MIN, le=DB_INT_MAX)
    owner: Optional[str] = Field(None, min_length=1)
    room: Optional[str] = Field(None, min_length=1)
    contents: Optional[str] = None
    status: Optional[str] = None


class StatusUpdateIn(BaseModel):
    status: BoxStatus


class PositionUpdateIn(BaseModel):
    position: BoxPosition
    status: Optional[BoxStatus] = None


class BoxOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    box_number: int
    owner: str
    room: str
    contents: str
    status: BoxStatus
    position: Optional[BoxPosition] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, value):
        return as_utc(value)
