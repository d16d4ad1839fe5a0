from typing import Optional

from pydantic import BaseModel, Field

from .user import UserResponse


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SigninRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SigninResponse(BaseModel):
    success: bool = True
    user: UserResponse
    sign_in: str


class RecoverPasswordRequest(BaseModel):
    email: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    id: Optional[str] = None
    reset_password_token: Optional[str] = None
    password: Optional[str] = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str
