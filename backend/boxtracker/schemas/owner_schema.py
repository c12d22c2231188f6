from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from boxtracker.schemas.box_schema import as_utc

HEX_COLOR = r"^#(?:[0-9a-fA-F]{3}){1,2}$"


class OwnerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    color: str = Field(..., pattern=HEX_COLOR)


class OwnerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    color: Optional[str] = Field(None, pattern=HEX_COLOR)


class OwnerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    color: str
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, value):
        return as_utc(value)
