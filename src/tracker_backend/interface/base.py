from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from tracker_backend.model.base import as_utc


class BaseEntityList(BaseModel):
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Update timestamp")

    @field_validator('created_at', 'updated_at', mode='after')
    @classmethod
    def normalize_timestamps(cls, v):
        return as_utc(v)

class BaseEntityGet(BaseEntityList):
    id: str = Field(description="Unique identifier")
