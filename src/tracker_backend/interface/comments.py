from pydantic import BaseModel, ConfigDict, Field

from tracker_backend.interface.base import BaseEntityGet
from tracker_backend.interface.users import UserSummary


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, description="Comment text")


class CommentUpdate(BaseModel):
    content: str = Field(min_length=1, description="Comment text")


class CommentGet(BaseEntityGet):
    task_id: str = Field(description="Task the comment belongs to")
    author_id: str = Field(description="Comment author")
    content: str = Field(description="Comment text")

    model_config = ConfigDict(from_attributes=True)


class CommentWithAuthor(BaseEntityGet):
    task_id: str = Field(description="Task the comment belongs to")
    author: UserSummary = Field(description="Author projection")
    content: str = Field(description="Comment text")

    model_config = ConfigDict(from_attributes=True)
