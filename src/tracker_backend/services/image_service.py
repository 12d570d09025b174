import asyncio
import logging
from typing import List, Optional, Tuple
from uuid import uuid4
from sqlalchemy.orm import Session

from ..api.exceptions import NotFoundException
from ..interface.images import ImageGet, ImageUpdate
from ..model.image import Image
from ..permissions.core import is_image_uploader, require
from ..repositories.base import RepositoryError
from ..repositories.image import ImageRepository
from ..storage_config import DEFAULT_IMAGE_FOLDER
from ..storage_security import (
    file_extension,
    guess_content_type,
    perform_image_validation,
    sanitize_filename,
    validate_path_segment,
)
from .base import parse_entity_id
from .storage_service import StorageService

logger = logging.getLogger(__name__)


class ImageService:
    """
    Image metadata rows backed by blobs in object storage.

    Reads and listings are open to any authenticated user; update and
    delete are reserved for the uploader.
    """

    def __init__(self, db: Session, storage: StorageService):
        self.db = db
        self.storage = storage
        self.images = ImageRepository(db)

    async def upload(
        self,
        data: bytes,
        filename: str,
        content_type: Optional[str],
        user_id: str,
        project_id: Optional[str] = None,
        task_id: Optional[str] = None,
        custom_name: Optional[str] = None,
        folder: Optional[str] = None
    ) -> ImageGet:
        original_filename = sanitize_filename(filename or "")
        content_type = guess_content_type(original_filename, content_type)
        perform_image_validation(content_type, len(data or b""))

        project_id = parse_entity_id(project_id, "project_id") if project_id else None
        task_id = parse_entity_id(task_id, "task_id") if task_id else None

        folder = folder or DEFAULT_IMAGE_FOLDER
        validate_path_segment(folder, "folder")
        if custom_name:
            validate_path_segment(custom_name, "custom name")

        stored_name = f"{custom_name or uuid4()}.{file_extension(original_filename)}"
        object_key = f"{folder}/{stored_name}"

        bucket = await self.storage.upload_file(data, object_key, content_type)

        loop = asyncio.get_event_loop()
        try:
            image = await loop.run_in_executor(None, self.images.create, Image(
                filename=stored_name,
                original_filename=original_filename,
                content_type=content_type,
                size=len(data),
                url=self.storage.object_url(object_key, bucket),
                bucket=bucket,
                object_key=object_key,
                uploaded_by=user_id,
                project_id=project_id,
                task_id=task_id,
            ))
        except RepositoryError:
            # Do not leave an orphaned blob behind
            await self.storage.delete_file(object_key, bucket)
            raise

        logger.info(f"Image {image.id} uploaded to {bucket}/{object_key} by {user_id}")
        return ImageGet.model_validate(image)

    def get(self, image_id: str) -> ImageGet:
        return ImageGet.model_validate(self._get_image(image_id))

    async def download(self, image_id: str) -> Tuple[ImageGet, bytes]:
        image = await asyncio.get_event_loop().run_in_executor(None, self._get_image, image_id)
        data = await self.storage.download_file(image.object_key, image.bucket)
        return ImageGet.model_validate(image), data

    def update(self, image_id: str, user_id: str, patch: ImageUpdate) -> ImageGet:
        image = self._get_image(image_id)
        require(is_image_uploader(image, user_id))

        changes = patch.changes()
        if not changes:
            return ImageGet.model_validate(image)

        if changes.get("filename") is None:
            changes.pop("filename", None)
        else:
            changes["filename"] = sanitize_filename(changes["filename"])
        # Empty or null associations clear the link.
        for field in ("project_id", "task_id"):
            if field in changes:
                changes[field] = parse_entity_id(changes[field], field) if changes[field] else None

        image = self.images.update(image, changes)
        return ImageGet.model_validate(image)

    async def delete(self, image_id: str, user_id: str) -> None:
        loop = asyncio.get_event_loop()
        image = await loop.run_in_executor(None, self._get_image, image_id)
        require(is_image_uploader(image, user_id))

        try:
            await self.storage.delete_file(image.object_key, image.bucket)
        except NotFoundException:
            logger.warning(f"Blob {image.bucket}/{image.object_key} already missing, removing metadata only")

        await loop.run_in_executor(None, self.images.delete, image)
        logger.info(f"Image {image_id} deleted by {user_id}")

    def list_by_project(self, project_id: str) -> List[ImageGet]:
        return [ImageGet.model_validate(i) for i in self.images.list_by(project_id=project_id)]

    def list_by_task(self, task_id: str) -> List[ImageGet]:
        return [ImageGet.model_validate(i) for i in self.images.list_by(task_id=task_id)]

    def list_by_uploader(self, user_id: str) -> List[ImageGet]:
        return [ImageGet.model_validate(i) for i in self.images.list_by(uploaded_by=user_id)]

    def _get_image(self, image_id: str) -> Image:
        image = self.images.get_by_id_optional(image_id)
        if image is None:
            raise NotFoundException("Image not found")
        return image
