from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

Role = Literal["user", "admin"]


# camelCase on the wire, snake_case in Python
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Schema for user registration requests
class UserCreate(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    profile_image_url: Optional[str] = None
    admin_invite_token: Optional[str] = None


# Schema for user authentication credentials; presence is checked by the route
class UserLogin(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


# Partial profile update, only supplied fields change
class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=1)
    profile_image_url: Optional[str] = None
    admin_invite_token: Optional[str] = None


# Output schema for user profile details
class UserResponse(CamelModel):
    id: int
    name: str
    email: EmailStr
    role: Role
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Profile plus a freshly issued token (signup, signin, profile update)
class AuthResponse(UserResponse):
    token: str


# Admin user listing entry with assignment counts
class UserWithTaskCounts(UserResponse):
    pending_tasks: int = 0
    in_progress_tasks: int = 0
    completed_tasks: int = 0


# Compact user shape embedded in task payloads
class UserSummary(CamelModel):
    id: int
    name: str
    email: str
    profile_image_url: Optional[str] = None


class ImageUrlResponse(CamelModel):
    image_url: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
