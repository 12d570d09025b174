from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from tracker_backend.interface.base import BaseEntityGet
from tracker_backend.interface.date_ranges import DateRangeGet
from tracker_backend.model.base import as_utc


class TaskStatus(str, Enum):
    todo = "ToDo"
    in_progress = "InProgress"
    done = "Done"
    cancelled = "Cancelled"


class TaskPriority(str, Enum):
    low = "Low"
    medium = "Medium"
    high = "High"
    urgent = "Urgent"


class TaskCreate(BaseModel):
    title: str = Field(min_length=3, max_length=255, description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    status: Optional[TaskStatus] = Field(None, description="Defaults to ToDo")
    priority: Optional[TaskPriority] = Field(None, description="Defaults to Medium")
    assignee_id: Optional[str] = Field(None, description="Assigned user id")
    start_date: Optional[datetime] = Field(None, description="Planned start")
    end_date: Optional[datetime] = Field(None, description="Due date, required when has_due_date is set")
    has_due_date: Optional[bool] = Field(None, description="Whether end_date is a due date")

    @field_validator('start_date', 'end_date', mode='after')
    @classmethod
    def normalize_dates(cls, v):
        return as_utc(v)

    model_config = ConfigDict(use_enum_values=True)


class TaskUpdate(BaseModel):
    """
    Partial task update.

    Fields left out of the payload are untouched. For description, assignee_id,
    start_date and end_date an explicit null clears the stored value; the
    remaining fields reject null.
    """
    title: Optional[str] = Field(None, min_length=3, max_length=255, description="Task title")
    description: Optional[str] = Field(None, description="Task description, null clears")
    status: Optional[TaskStatus] = Field(None, description="New status")
    priority: Optional[TaskPriority] = Field(None, description="New priority")
    assignee_id: Optional[str] = Field(None, description="Assigned user id, null unassigns")
    start_date: Optional[datetime] = Field(None, description="Planned start, null clears")
    end_date: Optional[datetime] = Field(None, description="Due date, null clears")
    has_due_date: Optional[bool] = Field(None, description="Whether end_date is a due date")

    @field_validator('start_date', 'end_date', mode='after')
    @classmethod
    def normalize_dates(cls, v):
        return as_utc(v)

    @model_validator(mode='after')
    def reject_null_for_required_fields(self):
        for field in ('title', 'status', 'priority', 'has_due_date'):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f'{field} cannot be null')
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)

    model_config = ConfigDict(use_enum_values=True)


class TaskGet(BaseEntityGet):
    project_id: str = Field(description="Owning project")
    title: str = Field(description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    status: TaskStatus = Field(description="Workflow status")
    priority: TaskPriority = Field(description="Priority")
    assignee_id: Optional[str] = Field(None, description="Assigned user id")
    reporter_id: str = Field(description="User who created the task")
    start_date: Optional[datetime] = Field(None, description="Planned start")
    end_date: Optional[datetime] = Field(None, description="Due date")
    has_due_date: bool = Field(False, description="Whether end_date is a due date")

    @field_validator('start_date', 'end_date', mode='after')
    @classmethod
    def normalize_dates(cls, v):
        return as_utc(v)

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class TaskFull(BaseModel):
    task: TaskGet
    date_range: Optional[DateRangeGet] = None
