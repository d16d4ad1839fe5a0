"""Authentication middleware and dependencies for FastAPI."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Header, Path, Request, status
from pymongo.database import Database

from app.config import settings
from app.core.security import decode_session_token
from app.database.mongo import get_db
from app.models.entities.user import User
from app.repositories.user import UserRepository


def extract_session_token(request: Request, authorization: Optional[str]) -> Optional[str]:
    # Cookie first, then Authorization header
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token
    if authorization and authorization.lower().startswith("bearer "):
        return authorization.split(None, 1)[1]
    return None


async def get_current_user_id(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> str:
    token = extract_session_token(request, authorization)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated. Please sign in.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_session_token(token)
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )
    return user_id


async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> User:
    user = UserRepository(db).find_by_id(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid User"
        )
    return user


async def require_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user


async def get_path_user(
    user_id: str = Path(...),
    db: Database = Depends(get_db),
) -> User:
    """Load the user named by the `{user_id}` path segment."""
    user = UserRepository(db).find_by_id(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="User not found"
        )
    return user


async def require_account_owner(
    path_user: User = Depends(get_path_user),
    current_user_id: str = Depends(get_current_user_id),
) -> User:
    """The `{user_id}` in the path must be the signed-in user."""
    if str(path_user.id) != current_user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only modify your own account",
        )
    return path_user


async def require_dashboard_admin(
    admin_id: str = Path(...),
    current_user: User = Depends(require_admin),
) -> User:
    """The `{admin_id}` in the path must be the signed-in admin."""
    if str(current_user.id) != admin_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin id does not match the signed-in user",
        )
    return current_user
