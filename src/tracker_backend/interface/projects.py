from enum import Enum
from typing import List, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, model_validator

from tracker_backend.interface.base import BaseEntityGet

PROJECT_KEY_PATTERN = r"^[A-Z0-9]+$"


class ProjectRoleEnum(str, Enum):
    owner = "owner"
    member = "member"


class ProjectCreate(BaseModel):
    name: str = Field(min_length=3, max_length=255, description="Project name")
    key: str = Field(min_length=2, max_length=10, pattern=PROJECT_KEY_PATTERN, description="Short uppercase project key")
    description: Optional[str] = Field(None, description="Project description")


class ProjectGet(BaseEntityGet):
    name: str = Field(description="Project name")
    key: str = Field(description="Short uppercase project key")
    description: Optional[str] = Field(None, description="Project description")
    owner_id: str = Field(description="Owning user")
    members: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("member_ids", "members"),
        description="Member user ids, never including the owner"
    )

    model_config = ConfigDict(from_attributes=True)


class ProjectWithRole(ProjectGet):
    user_role: ProjectRoleEnum = Field(description="Role of the requesting user in this project")

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=3, max_length=255, description="Project name")
    description: Optional[str] = Field(None, description="Project description")

    @model_validator(mode='after')
    def reject_null_name(self):
        if 'name' in self.model_fields_set and self.name is None:
            raise ValueError('name cannot be null')
        return self


class ProjectMemberAdd(BaseModel):
    email: EmailStr = Field(description="Email of the user to add")
