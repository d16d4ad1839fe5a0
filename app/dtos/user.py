"""User DTOs"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.entities.base import PyObjectIdStr
from app.models.entities.user import Photo, UserRole


class UserResponse(BaseModel):
    """Public view of a user; credentials and one-time tokens never leave the API."""

    id: PyObjectIdStr = Field(..., alias="_id")
    name: str
    email: str
    role: UserRole = "user"
    photo: Optional[Photo] = None
    is_verified: bool = False
    login_count: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)


class UserEnvelope(BaseModel):
    success: bool = True
    user: UserResponse


class UserListEnvelope(BaseModel):
    success: bool = True
    users: List[UserResponse]


class UpdatePasswordRequest(BaseModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class UpdateRoleRequest(BaseModel):
    role: Optional[UserRole] = None
