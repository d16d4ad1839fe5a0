"""Authentication, self-service account and admin user endpoints."""

from typing import Optional

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    Query,
    Response,
    UploadFile,
    status,
)
from pymongo.database import Database

from app.config import settings
from app.database.mongo import get_db
from app.dtos import (
    MessageResponse,
    RecoverPasswordRequest,
    ResetPasswordRequest,
    SigninRequest,
    SigninResponse,
    SignupRequest,
    UpdatePasswordRequest,
    UpdateRoleRequest,
    UserEnvelope,
    UserListEnvelope,
)
from app.middleware.auth import (
    get_current_user,
    get_path_user,
    require_account_owner,
    require_dashboard_admin,
)
from app.models.entities.user import User
from app.services.auth_service import AuthService
from app.services.photo_storage import PhotoStorage, get_photo_storage
from app.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=not settings.DEBUG,
        samesite="lax",
        max_age=settings.SESSION_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        path="/",
    )


@router.post("/signup", response_model=UserEnvelope)
def signup(payload: SignupRequest, db: Database = Depends(get_db)):
    service = AuthService(db)
    return UserEnvelope(user=service.signup(payload))


@router.get("/verify-email", response_model=UserEnvelope)
def verify_email(
    token: str = Query(..., description="Email verification token"),
    db: Database = Depends(get_db),
):
    service = AuthService(db)
    return UserEnvelope(user=service.verify_email(token))


@router.post("/signin", response_model=SigninResponse)
def signin(payload: SigninRequest, response: Response, db: Database = Depends(get_db)):
    service = AuthService(db)
    user, token = service.signin(payload)
    _set_session_cookie(response, token)
    return SigninResponse(user=user, sign_in=token)


@router.post("/signout", response_model=MessageResponse)
def signout(response: Response):
    """Sign out by clearing the session cookie."""
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=not settings.DEBUG,
        samesite="lax",
    )
    return MessageResponse(message="Signed out")


@router.get("/getuserfromtoken", response_model=UserEnvelope)
def get_user_from_token(
    user: User = Depends(get_current_user), db: Database = Depends(get_db)
):
    service = AuthService(db)
    return UserEnvelope(user=service.get_user_from_token(user))


@router.post("/recover/password", response_model=MessageResponse)
def recover_password(payload: RecoverPasswordRequest, db: Database = Depends(get_db)):
    service = AuthService(db)
    return MessageResponse(message=service.recover_password(payload))


@router.post("/resetPassword/password", response_model=MessageResponse)
def reset_password(payload: ResetPasswordRequest, db: Database = Depends(get_db)):
    service = AuthService(db)
    return MessageResponse(message=service.reset_password(payload))


@router.put("/user/update/{user_id}", response_model=UserEnvelope)
def update_profile(
    name: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    user: User = Depends(require_account_owner),
    storage: PhotoStorage = Depends(get_photo_storage),
    db: Database = Depends(get_db),
):
    service = UserService(db)
    return UserEnvelope(user=service.update_profile(user, name, photo, storage))


@router.put("/user/update/password/{user_id}", response_model=UserEnvelope)
def update_password(
    payload: UpdatePasswordRequest,
    user: User = Depends(require_account_owner),
    db: Database = Depends(get_db),
):
    service = UserService(db)
    return UserEnvelope(user=service.update_password(user, payload))


@router.get(
    "/admin/dashboard/{admin_id}/users",
    response_model=UserListEnvelope,
    dependencies=[Depends(require_dashboard_admin)],
)
def admin_list_users(db: Database = Depends(get_db)):
    service = UserService(db)
    return UserListEnvelope(users=service.list_users())


@router.put(
    "/admin/dashboard/{admin_id}/users/{user_id}/update/role",
    response_model=UserEnvelope,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_dashboard_admin)],
)
def admin_update_role(
    payload: UpdateRoleRequest,
    target: User = Depends(get_path_user),
    db: Database = Depends(get_db),
):
    service = UserService(db)
    return UserEnvelope(user=service.update_role(target, payload))
