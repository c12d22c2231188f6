from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from boxtracker.schemas.box_schema import DB_INT_MAX, DB_INT_MIN, as_utc


class ActivityCreate(BaseModel):
    box_id: Optional[int] = Field(None, ge=DB_INT_MIN, le=DB_INT_MAX)
    type: str = Field(..., min_length=1, max_length=32)
    description: str = Field(..., min_length=1)


class ActivityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    box_id: Optional[int] = None
    type: str
    description: str
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def ensure_utc(cls, value):
        return as_utc(value)
