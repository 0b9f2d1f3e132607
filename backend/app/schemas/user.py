"""
User Pydantic schemas.
"""

from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional
from backend.app.models.enums import UserRole


class UserLogin(BaseModel):
    """Schema for POST /users, sent by the client after every sign-in."""
    email: EmailStr
    name: Optional[str] = Field(None, max_length=255)
    photo_url: Optional[str] = Field(None, max_length=1024)


class UserResponse(BaseModel):
    id: int
    email: str
    name: Optional[str]
    photo_url: Optional[str]
    role: UserRole
    created_at: datetime
    last_log_in: Optional[datetime]

    class Config:
        from_attributes = True


class UserLoginResponse(BaseModel):
    user: UserResponse
    created: bool


class RoleResponse(BaseModel):
    role: UserRole


class RoleUpdate(BaseModel):
    role: UserRole


class ModifiedResult(BaseModel):
    modified_count: int
