from __future__ import annotations

import logging
from typing import Tuple

from bson import ObjectId
from fastapi import HTTPException, status
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from app.config import settings
from app.core.security import (
    create_email_verify_token,
    create_session_token,
    generate_reset_token,
    hash_password,
    is_email_verify_token_valid,
    reset_tokens_match,
    verify_password,
)
from app.dtos import (
    RecoverPasswordRequest,
    ResetPasswordRequest,
    SigninRequest,
    SignupRequest,
    UserResponse,
)
from app.models.entities.user import User
from app.repositories.user import UserRepository
from app.services.mail_service import build_reset_password_link
from app.tasks import mail as mail_tasks

logger = logging.getLogger(__name__)


def normalize_email(value: str | None) -> str:
    return (value or "").strip().lower()


def to_user_response(user: User) -> UserResponse:
    return UserResponse.model_validate(user.model_dump(by_alias=True))


def ensure_password_length(password: str | None) -> str:
    if not password or len(password) < settings.MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long",
        )
    return password


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AuthService:
    def __init__(self, db: Database):
        self.db = db
        self.user_repo = UserRepository(db)

    def signup(self, payload: SignupRequest) -> UserResponse:
        """Create an account and send the address a verification link."""
        email = normalize_email(payload.email)
        name = payload.name.strip()
        if not (name and email and payload.password):
            raise _bad_request("All fields are required")
        ensure_password_length(payload.password)

        if self.user_repo.find_by_email(email):
            raise _bad_request("User already exists")

        verify_token = create_email_verify_token()
        try:
            user = self.user_repo.create_user(
                name=name,
                email=email,
                password_hash=hash_password(payload.password),
                verify_token=verify_token,
            )
        except DuplicateKeyError:
            # Lost a race with a concurrent signup for the same email
            raise _bad_request("User already exists")

        logger.info("Created user %s", user.id)
        self._dispatch_email(
            mail_tasks.send_verification_email, user.email, user.name, verify_token
        )
        return to_user_response(user)

    def verify_email(self, token: str) -> UserResponse:
        invalid = _bad_request("Verification link is invalid or has expired")
        if not token or not is_email_verify_token_valid(token):
            raise invalid

        user = self.user_repo.find_by_verify_token(token)
        if not user:
            raise invalid

        updated = self.user_repo.mark_verified(user.id)
        logger.info("Verified email for user %s", user.id)
        return to_user_response(updated)

    def signin(self, payload: SigninRequest) -> Tuple[UserResponse, str]:
        """Check credentials, count the login and issue a session token."""
        email = normalize_email(payload.email)
        if not (email and payload.password):
            raise _bad_request("All fields are required")

        user = self.user_repo.find_by_email(email)
        if not (user and verify_password(payload.password, user.password)):
            raise _bad_request("Invalid email or password.")

        user = self.user_repo.record_login(user.id) or user
        token = create_session_token(subject=str(user.id), role=user.role)
        logger.info("User %s signed in (login #%s)", user.id, user.login_count)
        return to_user_response(user), token

    def get_user_from_token(self, user: User) -> UserResponse:
        return to_user_response(user)

    def recover_password(self, payload: RecoverPasswordRequest) -> str:
        email = normalize_email(payload.email)
        if not email:
            raise _bad_request("Enter email address")

        user = self.user_repo.find_by_email(email)
        if not user:
            raise _bad_request("User not found")

        token, expires_at = generate_reset_token()
        self.user_repo.set_reset_token(user.id, token, expires_at)

        link = build_reset_password_link(str(user.id), token)
        self._dispatch_email(
            mail_tasks.send_reset_password_email, user.email, user.name, link
        )
        return "Check your mail to reset your password"

    def reset_password(self, payload: ResetPasswordRequest) -> str:
        """Validate the emailed reset link and store the new password."""
        user_id = payload.id or ""
        if not (len(user_id) == 24 and ObjectId.is_valid(user_id) and payload.reset_password_token):
            raise _bad_request("Invalid url")

        user = self.user_repo.find_with_active_reset(user_id)
        if not user:
            raise _bad_request("Password reset token has expired.")

        if not reset_tokens_match(user.reset_password_token, payload.reset_password_token):
            raise _bad_request("Password reset token is invalid")

        password = ensure_password_length(payload.password)
        self.user_repo.set_password(user.id, hash_password(password))
        logger.info("Password reset for user %s", user.id)
        return "Password changed successfully"

    @staticmethod
    def _dispatch_email(task, *args) -> None:
        # Broker outages are logged, not raised
        try:
            task.delay(*args)
        except Exception as e:
            logger.error("Failed to queue %s: %s", task.name, e)
