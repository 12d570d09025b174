"""
Ownership and membership rules for projects, tasks, comments and images.

Every check is a pure function over already loaded entities and returns a
PermissionDecision. Callers resolve the target resource and its ancestors
first (missing rows are a 404), then evaluate, then call ``require`` before
touching storage.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel

from tracker_backend.api.exceptions import ForbiddenException
from tracker_backend.model.comment import Comment
from tracker_backend.model.image import Image
from tracker_backend.model.project import Project
from tracker_backend.model.task import Task


class DenyReason(str, Enum):
    not_member = "NotMember"
    not_owner = "NotOwner"
    not_author = "NotAuthor"


class PermissionDecision(BaseModel):
    allowed: bool
    reason: Optional[DenyReason] = None
    message: Optional[str] = None

    @classmethod
    def allow(cls) -> "PermissionDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason, message: str) -> "PermissionDecision":
        return cls(allowed=False, reason=reason, message=message)

    def __bool__(self) -> bool:
        return self.allowed


def can_access_project(project: Project, user_id: str) -> PermissionDecision:
    if project.owner_id == user_id or user_id in project.member_ids:
        return PermissionDecision.allow()
    return PermissionDecision.deny(DenyReason.not_member, "You don't have access to this project")


def is_project_owner(project: Project, user_id: str) -> PermissionDecision:
    if project.owner_id == user_id:
        return PermissionDecision.allow()
    return PermissionDecision.deny(DenyReason.not_owner, "Only the project owner can perform this action")


def can_update_task(project: Project, task: Task, user_id: str) -> PermissionDecision:
    return can_access_project(project, user_id)


def can_delete_task(project: Project, task: Task, user_id: str) -> PermissionDecision:
    # Narrower than update: plain members may edit but not delete.
    if project.owner_id == user_id:
        return PermissionDecision.allow()
    if task.assignee_id is not None and task.assignee_id == user_id:
        return PermissionDecision.allow()
    return PermissionDecision.deny(
        DenyReason.not_owner,
        "Only the project owner or the task assignee can delete this task"
    )


def is_comment_author(comment: Comment, user_id: str) -> PermissionDecision:
    if comment.author_id == user_id:
        return PermissionDecision.allow()
    return PermissionDecision.deny(DenyReason.not_author, "Only the comment author can perform this action")


def is_image_uploader(image: Image, user_id: str) -> PermissionDecision:
    if image.uploaded_by == user_id:
        return PermissionDecision.allow()
    return PermissionDecision.deny(DenyReason.not_author, "Only the uploader can perform this action")


def require(decision: PermissionDecision) -> None:
    """Raise ForbiddenException (403) carrying the deny reason."""
    if not decision.allowed:
        raise ForbiddenException(detail={
            "reason": decision.reason.value,
            "message": decision.message,
        })
