from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .base import BaseRepository, DuplicateError, RepositoryError
from ..model.auth import User
from ..model.base import utc_now
from ..model.project import Project, project_member


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db, Project)

    def find_by_key(self, key: str) -> Optional[Project]:
        return self.find_one_by(key=key)

    def list_for_user(self, user_id: str) -> List[Project]:
        """
        Projects the user owns or is a member of, newest first.

        Args:
            user_id: The user identifier

        Returns:
            Distinct list of projects
        """
        member_of = self.db.query(project_member.c.project_id).filter(
            project_member.c.user_id == user_id
        )
        return (
            self.db.query(Project)
            .filter(or_(Project.owner_id == user_id, Project.id.in_(member_of)))
            .order_by(Project.created_at.desc())
            .all()
        )

    def add_member(self, project: Project, user: User) -> bool:
        """
        Add a user to the member set.

        Returns:
            False when the user already was a member
        """
        if user.id in project.member_ids:
            return False
        try:
            project.members.append(user)
            project.updated_at = utc_now()
            self.db.commit()
            self.db.refresh(project)
            return True
        except IntegrityError:
            self.db.rollback()
            raise DuplicateError("ProjectMember", {"project_id": project.id, "user_id": user.id})
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Failed to add project member: {str(e)}")

    def remove_member(self, project: Project, user_id: str) -> bool:
        """
        Remove a user from the member set.

        Returns:
            False when the user was not a member
        """
        member = next((m for m in project.members if m.id == user_id), None)
        if member is None:
            return False
        try:
            project.members.remove(member)
            project.updated_at = utc_now()
            self.db.commit()
            self.db.refresh(project)
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Failed to remove project member: {str(e)}")
