import logging
from typing import List
from sqlalchemy.orm import Session

from ..api.exceptions import BadRequestException, NotFoundException
from ..interface.projects import (
    ProjectCreate,
    ProjectGet,
    ProjectRoleEnum,
    ProjectUpdate,
    ProjectWithRole,
)
from ..interface.users import UserGet
from ..model.project import Project
from ..permissions.core import is_project_owner, require
from ..repositories.user import UserRepository
from .base import ProjectScopedService

logger = logging.getLogger(__name__)


class ProjectService(ProjectScopedService):
    """Project lifecycle and membership management"""

    def __init__(self, db: Session):
        super().__init__(db)
        self.users = UserRepository(db)

    def create(self, schema: ProjectCreate, owner_id: str) -> ProjectGet:
        if self.projects.find_by_key(schema.key) is not None:
            raise BadRequestException(f"Project key '{schema.key}' already exists")

        project = self.projects.create(Project(
            name=schema.name,
            key=schema.key,
            description=schema.description,
            owner_id=owner_id,
        ))
        logger.info(f"Project {project.key} ({project.id}) created by {owner_id}")
        return ProjectGet.model_validate(project)

    def list_for_user(self, user_id: str) -> List[ProjectWithRole]:
        return [
            ProjectWithRole(
                **ProjectGet.model_validate(project).model_dump(),
                user_role=ProjectRoleEnum.owner if project.owner_id == user_id else ProjectRoleEnum.member
            )
            for project in self.projects.list_for_user(user_id)
        ]

    def get(self, project_id: str, user_id: str) -> ProjectGet:
        return ProjectGet.model_validate(self._accessible_project(project_id, user_id))

    def update(self, project_id: str, user_id: str, patch: ProjectUpdate) -> ProjectGet:
        project = self._get_project(project_id)
        require(is_project_owner(project, user_id))

        changes = patch.model_dump(exclude_unset=True)
        if not changes:
            return ProjectGet.model_validate(project)

        project = self.projects.update(project, changes)
        logger.info(f"Project {project_id} updated: {sorted(changes)}")
        return ProjectGet.model_validate(project)

    def delete(self, project_id: str, user_id: str) -> None:
        project = self._get_project(project_id)
        require(is_project_owner(project, user_id))

        # Tasks are left in place.
        self.projects.delete(project)
        logger.info(f"Project {project_id} deleted by {user_id}")

    def add_member(self, project_id: str, user_id: str, email: str) -> ProjectGet:
        project = self._get_project(project_id)
        require(is_project_owner(project, user_id))

        member = self.users.find_by_email(email)
        if member is None:
            raise NotFoundException("User not found")
        if member.id == project.owner_id:
            raise BadRequestException("The project owner cannot be added as a member")

        if self.projects.add_member(project, member):
            logger.info(f"User {member.id} added to project {project_id}")
        return ProjectGet.model_validate(project)

    def list_members(self, project_id: str, user_id: str) -> List[UserGet]:
        project = self._accessible_project(project_id, user_id)

        owner = self.users.get_by_id_optional(project.owner_id)
        people = ([owner] if owner is not None else []) + list(project.members)
        return [UserGet.model_validate(user) for user in people]

    def remove_member(self, project_id: str, user_id: str, member_id: str) -> None:
        project = self._get_project(project_id)
        require(is_project_owner(project, user_id))

        if member_id == project.owner_id:
            raise BadRequestException("The project owner cannot be removed")

        if not self.projects.remove_member(project, member_id):
            raise NotFoundException("Member not found in project")
        logger.info(f"User {member_id} removed from project {project_id}")
