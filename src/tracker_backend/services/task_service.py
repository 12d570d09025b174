import logging
from typing import List
from sqlalchemy.orm import Session

from ..interface.date_ranges import DateRangeGet
from ..interface.events import (
    TaskChanges,
    TaskCreatedEvent,
    TaskDeletedEvent,
    TaskUpdatedEvent,
    UpdatedFields,
)
from ..interface.tasks import TaskCreate, TaskFull, TaskGet, TaskPriority, TaskStatus, TaskUpdate
from ..model.base import as_utc
from ..model.task import Task
from ..notifications.hub import NotificationHub
from ..permissions.core import can_access_project, can_delete_task, can_update_task, require
from ..repositories.task import DateRangeRepository
from .base import ProjectScopedService, parse_entity_id, validate_task_dates

logger = logging.getLogger(__name__)


class TaskService(ProjectScopedService):
    """
    Task lifecycle inside a project.

    Every successful create, update and delete publishes a change event to
    the notification hub after the row has been written. Publishing never
    fails the request.
    """

    def __init__(self, db: Session, hub: NotificationHub):
        super().__init__(db)
        self.hub = hub
        self.date_ranges = DateRangeRepository(db)

    def create(self, project_id: str, reporter_id: str, schema: TaskCreate) -> TaskGet:
        has_due_date = bool(schema.has_due_date)
        validate_task_dates(has_due_date, schema.start_date, schema.end_date)

        project = self._get_project(project_id)
        require(can_access_project(project, reporter_id))

        assignee_id = None
        if schema.assignee_id is not None:
            assignee_id = parse_entity_id(schema.assignee_id, "assignee_id")

        task = self.tasks.create(Task(
            project_id=project.id,
            title=schema.title,
            description=schema.description,
            status=schema.status or TaskStatus.todo.value,
            priority=schema.priority or TaskPriority.medium.value,
            assignee_id=assignee_id,
            reporter_id=reporter_id,
            start_date=schema.start_date,
            end_date=schema.end_date,
            has_due_date=has_due_date,
        ))
        result = TaskGet.model_validate(task)
        logger.info(f"Task {task.id} created in project {project.id}")

        self.hub.publish_event(TaskCreatedEvent(task=result))
        return result

    def list_for_project(self, project_id: str, user_id: str) -> List[TaskGet]:
        project = self._accessible_project(project_id, user_id)
        return [TaskGet.model_validate(task) for task in self.tasks.list_by_project(project.id)]

    def get(self, task_id: str, user_id: str) -> TaskGet:
        task, _ = self._accessible_task(task_id, user_id)
        return TaskGet.model_validate(task)

    def get_full(self, task_id: str, user_id: str) -> TaskFull:
        task, _ = self._accessible_task(task_id, user_id)
        date_range = self.date_ranges.get_by_task(task.id)
        return TaskFull(
            task=TaskGet.model_validate(task),
            date_range=DateRangeGet.model_validate(date_range) if date_range is not None else None
        )

    def update(self, task_id: str, user_id: str, patch: TaskUpdate) -> TaskGet:
        task, project = self._get_task_and_project(task_id)
        require(can_update_task(project, task, user_id))

        changes = patch.changes()
        if not changes:
            return TaskGet.model_validate(task)

        if changes.get("assignee_id") is not None:
            changes["assignee_id"] = parse_entity_id(changes["assignee_id"], "assignee_id")

        validate_task_dates(
            changes.get("has_due_date", task.has_due_date),
            changes["start_date"] if "start_date" in changes else as_utc(task.start_date),
            changes["end_date"] if "end_date" in changes else as_utc(task.end_date),
        )

        previous_status = task.status if "status" in changes else None
        status_changed = "status" in changes

        task = self.tasks.update(task, changes)
        result = TaskGet.model_validate(task)
        logger.info(f"Task {task_id} updated: {sorted(changes)}")

        self.hub.publish_event(TaskUpdatedEvent(
            task=result,
            changes=TaskChanges(
                status_changed=status_changed,
                previous_status=previous_status,
                updated_fields=UpdatedFields.from_changes(changes),
            )
        ))
        return result

    def delete(self, task_id: str, user_id: str) -> None:
        task, project = self._get_task_and_project(task_id)
        require(can_delete_task(project, task, user_id))

        self.tasks.delete(task)
        logger.info(f"Task {task_id} deleted by {user_id}")

        self.hub.publish_event(TaskDeletedEvent(task_id=task_id, project_id=project.id))
