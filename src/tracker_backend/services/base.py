import uuid
from datetime import datetime
from typing import Optional, Tuple
from sqlalchemy.orm import Session

from ..api.exceptions import BadRequestException, NotFoundException
from ..model.project import Project
from ..model.task import Task
from ..permissions.core import can_access_project, require
from ..repositories.project import ProjectRepository
from ..repositories.task import TaskRepository


def parse_entity_id(value: str, field: str) -> str:
    """Normalize a client supplied id, rejecting anything that is not a UUID."""
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        raise BadRequestException(f"Invalid {field}: {value}")


def validate_date_order(start_date: Optional[datetime], end_date: Optional[datetime]) -> None:
    if start_date is not None and end_date is not None and start_date >= end_date:
        raise BadRequestException("start_date must be before end_date")


def validate_task_dates(has_due_date: bool, start_date: Optional[datetime], end_date: Optional[datetime]) -> None:
    if has_due_date and end_date is None:
        raise BadRequestException("end_date is required when has_due_date is true")
    if not has_due_date and end_date is not None:
        raise BadRequestException("end_date must not be set when has_due_date is false")
    validate_date_order(start_date, end_date)


class ProjectScopedService:
    """
    Shared lookups for services whose resources hang off a project.

    Lookups raise NotFoundException before any permission is evaluated.
    """

    def __init__(self, db: Session):
        self.db = db
        self.projects = ProjectRepository(db)
        self.tasks = TaskRepository(db)

    def _get_project(self, project_id: str) -> Project:
        project = self.projects.get_by_id_optional(project_id)
        if project is None:
            raise NotFoundException("Project not found")
        return project

    def _get_task(self, task_id: str) -> Task:
        task = self.tasks.get_by_id_optional(task_id)
        if task is None:
            raise NotFoundException("Task not found")
        return task

    def _get_task_and_project(self, task_id: str) -> Tuple[Task, Project]:
        task = self._get_task(task_id)
        return task, self._get_project(task.project_id)

    def _accessible_project(self, project_id: str, user_id: str) -> Project:
        project = self._get_project(project_id)
        require(can_access_project(project, user_id))
        return project

    def _accessible_task(self, task_id: str, user_id: str) -> Tuple[Task, Project]:
        task, project = self._get_task_and_project(task_id)
        require(can_access_project(project, user_id))
        return task, project
