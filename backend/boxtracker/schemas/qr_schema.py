from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from boxtracker.schemas.box_schema import as_utc


class QrCodeCreate(BaseModel):
    box_id: int
    data: str


class QrCodeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    box_id: int
    data: str
    created_at: Optional[datetime] = None

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, value):
        return as_utc(value)


class QrScanIn(BaseModel):
    data: str
