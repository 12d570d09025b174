import logging
from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status

from .dependencies import get_image_service
from .exceptions import BadRequestException
from ..interface.images import ImageGet, ImageUpdate
from ..permissions.auth import get_current_principal
from ..permissions.principal import Principal
from ..services.image_service import ImageService

logger = logging.getLogger(__name__)

image_router = APIRouter(prefix="/images", tags=["images"])

CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


@image_router.post("", response_model=ImageGet, status_code=status.HTTP_201_CREATED)
async def upload_image(
    principal: CurrentPrincipal,
    file: Optional[UploadFile] = File(None),
    custom_name: Optional[str] = Form(None),
    folder: Optional[str] = Form(None),
    project_id: Optional[str] = Query(None),
    task_id: Optional[str] = Query(None),
    service: ImageService = Depends(get_image_service)
):
    """Upload an image (max 10 MiB) to object storage"""
    if file is None:
        raise BadRequestException("No file was uploaded")

    data = await file.read()

    return await service.upload(
        data=data,
        filename=file.filename or "",
        content_type=file.content_type,
        user_id=principal.get_user_id_or_throw(),
        project_id=project_id,
        task_id=task_id,
        custom_name=custom_name,
        folder=folder,
    )


@image_router.get("", response_model=List[ImageGet])
def list_my_images(principal: CurrentPrincipal, service: ImageService = Depends(get_image_service)):
    return service.list_by_uploader(principal.get_user_id_or_throw())


@image_router.get("/{image_id}", response_model=ImageGet)
def get_image(image_id: str, principal: CurrentPrincipal, service: ImageService = Depends(get_image_service)):
    return service.get(image_id)


@image_router.get("/{image_id}/download")
async def download_image(image_id: str, principal: CurrentPrincipal, service: ImageService = Depends(get_image_service)):
    image, data = await service.download(image_id)
    return Response(
        content=data,
        media_type=image.content_type,
        headers={"Content-Disposition": f'inline; filename="{image.original_filename}"'}
    )


@image_router.patch("/{image_id}", response_model=ImageGet)
def update_image(
    image_id: str,
    payload: ImageUpdate,
    principal: CurrentPrincipal,
    service: ImageService = Depends(get_image_service)
):
    return service.update(image_id, principal.get_user_id_or_throw(), payload)


@image_router.delete("/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_image(image_id: str, principal: CurrentPrincipal, service: ImageService = Depends(get_image_service)):
    await service.delete(image_id, principal.get_user_id_or_throw())
    return Response(status_code=status.HTTP_204_NO_CONTENT)
