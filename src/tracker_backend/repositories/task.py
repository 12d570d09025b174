from typing import List, Optional
from sqlalchemy.orm import Session

from .base import BaseRepository
from ..model.task import Task, TaskDateRange


class TaskRepository(BaseRepository[Task]):
    """Repository for Task entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db, Task)

    def list_by_project(self, project_id: str) -> List[Task]:
        return (
            self.db.query(Task)
            .filter(Task.project_id == project_id)
            .order_by(Task.created_at.asc())
            .all()
        )


class DateRangeRepository(BaseRepository[TaskDateRange]):
    """Repository for task date ranges, at most one per task."""

    def __init__(self, db: Session):
        super().__init__(db, TaskDateRange)

    def get_by_task(self, task_id: str) -> Optional[TaskDateRange]:
        return self.find_one_by(task_id=task_id)

    def list_by_project(self, project_id: str) -> List[TaskDateRange]:
        return (
            self.db.query(TaskDateRange)
            .join(Task, Task.id == TaskDateRange.task_id)
            .filter(Task.project_id == project_id)
            .order_by(TaskDateRange.start_date.asc())
            .all()
        )
