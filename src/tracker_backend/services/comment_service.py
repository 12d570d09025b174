import logging
from typing import List
from sqlalchemy.orm import Session

from ..api.exceptions import NotFoundException
from ..interface.comments import CommentWithAuthor
from ..model.comment import Comment
from ..permissions.core import is_comment_author, require
from ..repositories.comment import CommentRepository
from .base import ProjectScopedService

logger = logging.getLogger(__name__)


class CommentService(ProjectScopedService):

    def __init__(self, db: Session):
        super().__init__(db)
        self.comments = CommentRepository(db)

    def create(self, task_id: str, user_id: str, content: str) -> CommentWithAuthor:
        task, _ = self._accessible_task(task_id, user_id)

        comment = self.comments.create(Comment(task_id=task.id, author_id=user_id, content=content))
        logger.info(f"Comment {comment.id} added to task {task.id}")
        return CommentWithAuthor.model_validate(comment)

    def list_for_task(self, task_id: str, user_id: str) -> List[CommentWithAuthor]:
        task, _ = self._accessible_task(task_id, user_id)
        return [CommentWithAuthor.model_validate(c) for c in self.comments.list_with_authors(task.id)]

    def update(self, task_id: str, comment_id: str, user_id: str, content: str) -> CommentWithAuthor:
        comment = self._get_comment(task_id, comment_id)
        require(is_comment_author(comment, user_id))

        comment = self.comments.update(comment, {"content": content})
        return CommentWithAuthor.model_validate(comment)

    def delete(self, task_id: str, comment_id: str, user_id: str) -> None:
        comment = self._get_comment(task_id, comment_id)
        require(is_comment_author(comment, user_id))

        self.comments.delete(comment)
        logger.info(f"Comment {comment_id} deleted by {user_id}")

    def _get_comment(self, task_id: str, comment_id: str) -> Comment:
        task, _ = self._get_task_and_project(task_id)
        comment = self.comments.get_by_id_optional(comment_id)
        if comment is None or comment.task_id != task.id:
            raise NotFoundException("Comment not found")
        return comment
