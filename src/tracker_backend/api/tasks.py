from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, Response, status

from .dependencies import (
    get_comment_service,
    get_date_range_service,
    get_image_service,
    get_task_service,
)
from ..interface.comments import CommentCreate, CommentUpdate, CommentWithAuthor
from ..interface.date_ranges import DateRangeGet, DateRangeSet, DateRangeUpdate
from ..interface.images import ImageGet
from ..interface.tasks import TaskFull, TaskGet, TaskUpdate
from ..permissions.auth import get_current_principal
from ..permissions.principal import Principal
from ..services.comment_service import CommentService
from ..services.date_range_service import DateRangeService
from ..services.image_service import ImageService
from ..services.task_service import TaskService

task_router = APIRouter(prefix="/tasks", tags=["tasks"])

CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


@task_router.get("/{task_id}", response_model=TaskGet)
def get_task(task_id: str, principal: CurrentPrincipal, service: TaskService = Depends(get_task_service)):
    return service.get(task_id, principal.get_user_id_or_throw())


@task_router.get("/{task_id}/full", response_model=TaskFull)
def get_task_full(task_id: str, principal: CurrentPrincipal, service: TaskService = Depends(get_task_service)):
    """Task together with its planning date range"""
    return service.get_full(task_id, principal.get_user_id_or_throw())


@task_router.patch("/{task_id}", response_model=TaskGet)
def update_task(
    task_id: str,
    payload: TaskUpdate,
    principal: CurrentPrincipal,
    service: TaskService = Depends(get_task_service)
):
    """Partial update; omitted fields stay unchanged"""
    return service.update(task_id, principal.get_user_id_or_throw(), payload)


@task_router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, principal: CurrentPrincipal, service: TaskService = Depends(get_task_service)):
    service.delete(task_id, principal.get_user_id_or_throw())
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Comments

@task_router.post("/{task_id}/comments", response_model=CommentWithAuthor, status_code=status.HTTP_201_CREATED)
def create_comment(
    task_id: str,
    payload: CommentCreate,
    principal: CurrentPrincipal,
    service: CommentService = Depends(get_comment_service)
):
    return service.create(task_id, principal.get_user_id_or_throw(), payload.content)


@task_router.get("/{task_id}/comments", response_model=List[CommentWithAuthor])
def list_comments(task_id: str, principal: CurrentPrincipal, service: CommentService = Depends(get_comment_service)):
    return service.list_for_task(task_id, principal.get_user_id_or_throw())


@task_router.patch("/{task_id}/comments/{comment_id}", response_model=CommentWithAuthor)
def update_comment(
    task_id: str,
    comment_id: str,
    payload: CommentUpdate,
    principal: CurrentPrincipal,
    service: CommentService = Depends(get_comment_service)
):
    return service.update(task_id, comment_id, principal.get_user_id_or_throw(), payload.content)


@task_router.delete("/{task_id}/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    task_id: str,
    comment_id: str,
    principal: CurrentPrincipal,
    service: CommentService = Depends(get_comment_service)
):
    service.delete(task_id, comment_id, principal.get_user_id_or_throw())
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Date range

@task_router.post("/{task_id}/date-range", response_model=DateRangeGet)
def set_date_range(
    task_id: str,
    payload: DateRangeSet,
    principal: CurrentPrincipal,
    service: DateRangeService = Depends(get_date_range_service)
):
    """Create or replace the task's date range"""
    return service.set(task_id, principal.get_user_id_or_throw(), payload)


@task_router.get("/{task_id}/date-range", response_model=Optional[DateRangeGet])
def get_date_range(task_id: str, principal: CurrentPrincipal, service: DateRangeService = Depends(get_date_range_service)):
    return service.get(task_id, principal.get_user_id_or_throw())


@task_router.patch("/{task_id}/date-range", response_model=DateRangeGet)
def update_date_range(
    task_id: str,
    payload: DateRangeUpdate,
    principal: CurrentPrincipal,
    service: DateRangeService = Depends(get_date_range_service)
):
    return service.update(task_id, principal.get_user_id_or_throw(), payload)


@task_router.delete("/{task_id}/date-range", status_code=status.HTTP_204_NO_CONTENT)
def delete_date_range(task_id: str, principal: CurrentPrincipal, service: DateRangeService = Depends(get_date_range_service)):
    service.delete(task_id, principal.get_user_id_or_throw())
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@task_router.get("/{task_id}/images", response_model=List[ImageGet])
def list_task_images(task_id: str, principal: CurrentPrincipal, service: ImageService = Depends(get_image_service)):
    return service.list_by_task(task_id)
