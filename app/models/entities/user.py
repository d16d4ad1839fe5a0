"""User entity - represents a shop account in the database"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

from .base import BaseEntity

UserRole = Literal["admin", "user"]


class Photo(BaseModel):
    public_id: str
    secure_url: str


class User(BaseEntity):
    name: str
    email: str
    password: str
    role: UserRole = "user"
    photo: Optional[Photo] = None
    is_verified: bool = False
    verify_token: Optional[str] = None
    reset_password_token: Optional[str] = None
    reset_password_expires: Optional[datetime] = None
    login_count: int = 0
