from typing import List
from sqlalchemy.orm import Session, joinedload

from .base import BaseRepository
from ..model.comment import Comment


class CommentRepository(BaseRepository[Comment]):
    """Repository for Comment entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db, Comment)

    def list_with_authors(self, task_id: str) -> List[Comment]:
        """Comments of a task, oldest first, with the author row loaded."""
        return (
            self.db.query(Comment)
            .options(joinedload(Comment.author))
            .filter(Comment.task_id == task_id)
            .order_by(Comment.created_at.asc())
            .all()
        )
