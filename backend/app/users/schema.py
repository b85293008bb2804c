from enum import Enum
from pydantic import EmailStr, Field
from typing import Optional

from ..models import CustomModel, LocalDatetime
from .models import UserRole


class UserSortField(str, Enum):
    NAME = "name"
    CREATED_AT = "createdAt"

    @property
    def column(self) -> str:
        return "created_at" if self is UserSortField.CREATED_AT else "name"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class UserBase(CustomModel):
    email: EmailStr = Field(..., json_schema_extra={"example": "maria.santos@example.com"})
    name: str = Field(..., min_length=1, max_length=100, json_schema_extra={"example": "Maria Silva Santos"})

class UserCreate(UserBase):
    """Admin-initiated creation. Role is optional and defaults to `user`."""
    password: str = Field(..., min_length=6, json_schema_extra={"example": "strongpassword123"})
    role: UserRole = UserRole.USER

class UserUpdate(CustomModel):
    """Self-service change-set. Email is not part of it; use the admin edit path."""
    name: Optional[str] = Field(None, min_length=1, max_length=100, json_schema_extra={"example": "Maria Santos"})
    password: Optional[str] = Field(None, min_length=6, json_schema_extra={"example": "newPassword456"})
    current_password: Optional[str] = Field(None, json_schema_extra={"example": "strongpassword123"})
    role: Optional[UserRole] = None

class AdminEditUser(CustomModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[UserRole] = None

class UserPublic(UserBase):
    id: str = Field(..., json_schema_extra={"example": "123e4567-e89b-12d3-a456-426614174000"})
    role: UserRole
    last_login: Optional[LocalDatetime] = None
    created_at: LocalDatetime
    updated_at: LocalDatetime

class EditorSummary(CustomModel):
    id: str
    name: str
    email: EmailStr

class AdminEditedUser(UserPublic):
    edited_by: EditorSummary
    edited_at: LocalDatetime
