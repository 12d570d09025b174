from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from tracker_backend.interface.base import BaseEntityGet
from tracker_backend.model.base import as_utc


class DateRangeSet(BaseModel):
    start_date: datetime = Field(description="Range start, strictly before end_date")
    end_date: datetime = Field(description="Range end")

    @field_validator('start_date', 'end_date', mode='after')
    @classmethod
    def normalize_dates(cls, v):
        return as_utc(v)


class DateRangeUpdate(BaseModel):
    start_date: Optional[datetime] = Field(None, description="New range start")
    end_date: Optional[datetime] = Field(None, description="New range end")

    @field_validator('start_date', 'end_date', mode='after')
    @classmethod
    def normalize_dates(cls, v):
        return as_utc(v)


class DateRangeGet(BaseEntityGet):
    task_id: str = Field(description="Task the range belongs to")
    start_date: datetime = Field(description="Range start")
    end_date: datetime = Field(description="Range end")

    @field_validator('start_date', 'end_date', mode='after')
    @classmethod
    def normalize_dates(cls, v):
        return as_utc(v)

    model_config = ConfigDict(from_attributes=True)
