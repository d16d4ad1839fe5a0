"""Password hashing and token helpers."""

from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
from fastapi import HTTPException, status
from jose import JWTError, jwt

from app.config import settings

SESSION_TOKEN_TYPE = "access"
EMAIL_VERIFY_TOKEN_TYPE = "email_verify"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_session_token(
    subject: str, role: str, expires_delta: Optional[timedelta] = None
) -> str:
    if expires_delta is None:
        expires_delta = timedelta(days=settings.SESSION_TOKEN_EXPIRE_DAYS)

    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(subject),
        "role": role,
        "exp": now + expires_delta,
        "iat": now,
        "type": SESSION_TOKEN_TYPE,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_session_token(token: str) -> dict[str, Any]:
    """Decode a session token, raising 401 when it is invalid or expired."""
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Could not validate credentials: {str(e)}",
        )

    if payload.get("type") != SESSION_TOKEN_TYPE:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token type"
        )
    return payload


def session_subject(token: Optional[str]) -> Optional[str]:
    """User id carried by a valid session token, else None."""
    if not token:
        return None
    try:
        return decode_session_token(token).get("sub")
    except HTTPException:
        return None


def create_email_verify_token(expires_delta: Optional[timedelta] = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.EMAIL_VERIFY_TOKEN_EXPIRE_MINUTES)

    payload: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "exp": datetime.now(timezone.utc) + expires_delta,
        "type": EMAIL_VERIFY_TOKEN_TYPE,
    }
    return jwt.encode(
        payload, settings.EMAIL_VERIFY_TOKEN_SECRET_KEY, algorithm=settings.ALGORITHM
    )


def is_email_verify_token_valid(token: str) -> bool:
    try:
        payload = jwt.decode(
            token,
            settings.EMAIL_VERIFY_TOKEN_SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except JWTError:
        return False
    return payload.get("type") == EMAIL_VERIFY_TOKEN_TYPE


def generate_reset_token() -> tuple[str, datetime]:
    """Return a random reset token and the moment it stops being accepted."""
    expires_at = datetime.now(timezone.utc) + timedelta(
        minutes=settings.RESET_PASSWORD_EXPIRE_MINUTES
    )
    return secrets.token_hex(20), expires_at


def reset_tokens_match(expected: Optional[str], provided: str) -> bool:
    if not expected:
        return False
    return secrets.compare_digest(expected, provided)
