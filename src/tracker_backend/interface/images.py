from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from tracker_backend.interface.base import BaseEntityGet


class ImageGet(BaseEntityGet):
    filename: str = Field(description="Stored file name")
    original_filename: str = Field(description="Name of the uploaded file")
    content_type: str = Field(description="MIME type")
    size: int = Field(description="Size in bytes")
    url: str = Field(description="Public location of the blob")
    uploaded_by: str = Field(description="Uploader user id")
    project_id: Optional[str] = Field(None, description="Associated project")
    task_id: Optional[str] = Field(None, description="Associated task")

    model_config = ConfigDict(from_attributes=True)


class ImageUpdate(BaseModel):
    filename: Optional[str] = Field(None, min_length=1, max_length=255, description="New display file name")
    project_id: Optional[str] = Field(None, description="Associated project, null clears")
    task_id: Optional[str] = Field(None, description="Associated task, null clears")

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
