from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from tracker_backend.interface.base import BaseEntityGet


class UserRoleEnum(str, Enum):
    admin = "Admin"
    project_manager = "ProjectManager"
    member = "Member"
    viewer = "Viewer"


class UserCreate(BaseModel):
    username: str = Field(min_length=5, max_length=255, description="Unique username")
    email: EmailStr = Field(description="User's email address")
    password: str = Field(min_length=8, max_length=255, description="Plain password, hashed before storage")
    first_name: str = Field(min_length=1, max_length=255, description="User's first name")
    last_name: str = Field(min_length=1, max_length=255, description="User's last name")
    bio: str = Field("", description="Short biography")
    role: UserRoleEnum = Field(UserRoleEnum.member, description="Informational role, not used for authorization")
    avatar: str = Field("", description="Avatar URL")

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_names(cls, v):
        if not v.strip():
            raise ValueError('Name cannot be empty or only whitespace')
        return v.strip()

    model_config = ConfigDict(use_enum_values=True)


class UserLogin(BaseModel):
    email: EmailStr = Field(description="Registered email address")
    password: str = Field(min_length=1, description="Plain password")


class UserGet(BaseEntityGet):
    username: str = Field(description="Unique username")
    email: EmailStr = Field(description="User's email address")
    first_name: str = Field(description="User's first name")
    last_name: str = Field(description="User's last name")
    bio: str = Field("", description="Short biography")
    role: UserRoleEnum = Field(description="Informational role")
    avatar: str = Field("", description="Avatar URL")

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class UserSummary(BaseModel):
    id: str = Field(description="User unique identifier")
    username: str = Field(description="Unique username")
    email: EmailStr = Field(description="User's email address")

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=5, max_length=255, description="Unique username")
    email: Optional[EmailStr] = Field(None, description="User's email address")
    first_name: Optional[str] = Field(None, min_length=1, max_length=255, description="User's first name")
    last_name: Optional[str] = Field(None, min_length=1, max_length=255, description="User's last name")
    bio: Optional[str] = Field(None, description="Short biography")
    role: Optional[UserRoleEnum] = Field(None, description="Informational role")
    avatar: Optional[str] = Field(None, description="Avatar URL")

    model_config = ConfigDict(use_enum_values=True)


class LoginResponse(BaseModel):
    token: str = Field(description="Bearer token for the Authorization header")
    user: UserGet
