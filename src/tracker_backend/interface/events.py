from enum import Enum
from typing import Literal, Optional
from pydantic import BaseModel, Field

from tracker_backend.interface.tasks import TaskGet


class TaskEventType(str, Enum):
    created = "TASK_CREATED"
    updated = "TASK_UPDATED"
    deleted = "TASK_DELETED"


class UpdatedFields(BaseModel):
    title: bool = False
    description: bool = False
    status: bool = False
    priority: bool = False
    assignee_id: bool = False
    start_date: bool = False
    end_date: bool = False
    has_due_date: bool = False

    @classmethod
    def from_changes(cls, changes: dict) -> "UpdatedFields":
        return cls(**{field: field in changes for field in cls.model_fields})


class TaskChanges(BaseModel):
    status_changed: bool = Field(description="Status was supplied in the update, even when unchanged")
    previous_status: Optional[str] = Field(None, description="Status before the update when status was supplied")
    updated_fields: UpdatedFields


class TaskCreatedEvent(BaseModel):
    event_type: Literal["TASK_CREATED"] = TaskEventType.created.value
    task: TaskGet


class TaskUpdatedEvent(BaseModel):
    event_type: Literal["TASK_UPDATED"] = TaskEventType.updated.value
    task: TaskGet
    changes: TaskChanges


class TaskDeletedEvent(BaseModel):
    event_type: Literal["TASK_DELETED"] = TaskEventType.deleted.value
    task_id: str
    project_id: str
