from typing import Annotated, List
from fastapi import APIRouter, Depends, Response, status

from .dependencies import (
    get_date_range_service,
    get_image_service,
    get_project_service,
    get_task_service,
)
from ..interface.date_ranges import DateRangeGet
from ..interface.images import ImageGet
from ..interface.projects import (
    ProjectCreate,
    ProjectGet,
    ProjectMemberAdd,
    ProjectUpdate,
    ProjectWithRole,
)
from ..interface.tasks import TaskCreate, TaskGet
from ..interface.users import UserGet
from ..permissions.auth import get_current_principal
from ..permissions.principal import Principal
from ..services.date_range_service import DateRangeService
from ..services.image_service import ImageService
from ..services.project_service import ProjectService
from ..services.task_service import TaskService

project_router = APIRouter(prefix="/projects", tags=["projects"])

CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


@project_router.post("", response_model=ProjectGet, status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreate,
    principal: CurrentPrincipal,
    service: ProjectService = Depends(get_project_service)
):
    return service.create(payload, principal.get_user_id_or_throw())


@project_router.get("", response_model=List[ProjectWithRole])
def list_projects(principal: CurrentPrincipal, service: ProjectService = Depends(get_project_service)):
    """Projects the caller owns or is a member of"""
    return service.list_for_user(principal.get_user_id_or_throw())


@project_router.get("/{project_id}", response_model=ProjectGet)
def get_project(project_id: str, principal: CurrentPrincipal, service: ProjectService = Depends(get_project_service)):
    return service.get(project_id, principal.get_user_id_or_throw())


@project_router.patch("/{project_id}", response_model=ProjectGet)
def update_project(
    project_id: str,
    payload: ProjectUpdate,
    principal: CurrentPrincipal,
    service: ProjectService = Depends(get_project_service)
):
    return service.update(project_id, principal.get_user_id_or_throw(), payload)


@project_router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(project_id: str, principal: CurrentPrincipal, service: ProjectService = Depends(get_project_service)):
    service.delete(project_id, principal.get_user_id_or_throw())
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@project_router.post("/{project_id}/members", response_model=ProjectGet)
def add_member(
    project_id: str,
    payload: ProjectMemberAdd,
    principal: CurrentPrincipal,
    service: ProjectService = Depends(get_project_service)
):
    return service.add_member(project_id, principal.get_user_id_or_throw(), payload.email)


@project_router.get("/{project_id}/members", response_model=List[UserGet])
def list_members(project_id: str, principal: CurrentPrincipal, service: ProjectService = Depends(get_project_service)):
    """Owner first, then members"""
    return service.list_members(project_id, principal.get_user_id_or_throw())


@project_router.delete("/{project_id}/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    project_id: str,
    member_id: str,
    principal: CurrentPrincipal,
    service: ProjectService = Depends(get_project_service)
):
    service.remove_member(project_id, principal.get_user_id_or_throw(), member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@project_router.post("/{project_id}/tasks", response_model=TaskGet, status_code=status.HTTP_201_CREATED)
def create_task(
    project_id: str,
    payload: TaskCreate,
    principal: CurrentPrincipal,
    service: TaskService = Depends(get_task_service)
):
    return service.create(project_id, principal.get_user_id_or_throw(), payload)


@project_router.get("/{project_id}/tasks", response_model=List[TaskGet])
def list_tasks(project_id: str, principal: CurrentPrincipal, service: TaskService = Depends(get_task_service)):
    return service.list_for_project(project_id, principal.get_user_id_or_throw())


@project_router.get("/{project_id}/date-ranges", response_model=List[DateRangeGet])
def list_date_ranges(
    project_id: str,
    principal: CurrentPrincipal,
    service: DateRangeService = Depends(get_date_range_service)
):
    return service.list_for_project(project_id, principal.get_user_id_or_throw())


@project_router.get("/{project_id}/images", response_model=List[ImageGet])
def list_project_images(project_id: str, principal: CurrentPrincipal, service: ImageService = Depends(get_image_service)):
    return service.list_by_project(project_id)
