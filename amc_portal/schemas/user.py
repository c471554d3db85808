# amc_portal/schemas/user.py
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from amc_portal.models.enums import UserRole
from amc_portal.schemas.common import CamelModel, UTCDateTime


class UserCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.USER
    post: Optional[str] = Field(None, max_length=100)
    department: Optional[str] = Field(None, max_length=100)

    @field_validator("name", "post", "department", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole


class UserUpdate(CamelModel):
    """Profile fields a user (or an admin) may change; role and email are fixed"""

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    post: Optional[str] = Field(None, max_length=100)
    department: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = Field(None, max_length=255)


class PasswordChange(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class UserOut(CamelModel):
    id: str
    name: str
    email: str
    role: UserRole
    post: Optional[str] = None
    department: Optional[str] = None
    avatar_url: Optional[str] = None
    join_date: Optional[UTCDateTime] = None
    last_login: Optional[UTCDateTime] = None
    is_active: bool = True
    created_at: Optional[UTCDateTime] = None
