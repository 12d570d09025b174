import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from ..api.exceptions import BadRequestException, NotFoundException
from ..interface.date_ranges import DateRangeGet, DateRangeSet, DateRangeUpdate
from ..model.base import as_utc
from ..model.task import TaskDateRange
from ..repositories.task import DateRangeRepository
from .base import ProjectScopedService, validate_date_order

logger = logging.getLogger(__name__)


class DateRangeService(ProjectScopedService):
    """Planning window of a task, at most one per task."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.date_ranges = DateRangeRepository(db)

    def set(self, task_id: str, user_id: str, schema: DateRangeSet) -> DateRangeGet:
        task, _ = self._accessible_task(task_id, user_id)
        validate_date_order(schema.start_date, schema.end_date)

        existing = self.date_ranges.get_by_task(task.id)
        if existing is not None:
            date_range = self.date_ranges.update(existing, {
                "start_date": schema.start_date,
                "end_date": schema.end_date,
            })
        else:
            date_range = self.date_ranges.create(TaskDateRange(
                task_id=task.id,
                start_date=schema.start_date,
                end_date=schema.end_date,
            ))
        logger.info(f"Date range set for task {task.id}")
        return DateRangeGet.model_validate(date_range)

    def get(self, task_id: str, user_id: str) -> Optional[DateRangeGet]:
        task, _ = self._accessible_task(task_id, user_id)
        date_range = self.date_ranges.get_by_task(task.id)
        return DateRangeGet.model_validate(date_range) if date_range is not None else None

    def list_for_project(self, project_id: str, user_id: str) -> List[DateRangeGet]:
        project = self._accessible_project(project_id, user_id)
        return [DateRangeGet.model_validate(r) for r in self.date_ranges.list_by_project(project.id)]

    def update(self, task_id: str, user_id: str, patch: DateRangeUpdate) -> DateRangeGet:
        task, _ = self._accessible_task(task_id, user_id)

        date_range = self.date_ranges.get_by_task(task.id)
        if date_range is None:
            raise NotFoundException("Date range not found")

        changes = {k: v for k, v in patch.model_dump(exclude_unset=True).items() if v is not None}
        if not changes:
            raise BadRequestException("No fields to update")

        validate_date_order(
            changes.get("start_date", as_utc(date_range.start_date)),
            changes.get("end_date", as_utc(date_range.end_date)),
        )

        date_range = self.date_ranges.update(date_range, changes)
        return DateRangeGet.model_validate(date_range)

    def delete(self, task_id: str, user_id: str) -> None:
        task, _ = self._accessible_task(task_id, user_id)

        date_range = self.date_ranges.get_by_task(task.id)
        if date_range is None:
            raise NotFoundException("Date range not found")

        self.date_ranges.delete(date_range)
        logger.info(f"Date range removed from task {task.id}")
