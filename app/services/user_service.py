"""User account service using repository pattern"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, UploadFile, status
from pymongo.database import Database

from app.core.security import hash_password, verify_password
from app.dtos import UpdatePasswordRequest, UpdateRoleRequest, UserResponse
from app.models.entities.user import User
from app.repositories.user import UserRepository
from app.services.auth_service import ensure_password_length, to_user_response
from app.services.exceptions import PhotoStorageError, UnsupportedPhotoTypeError
from app.services.photo_storage import PhotoStorage

logger = logging.getLogger(__name__)

PHOTO_FOLDER = "users"


class UserService:
    def __init__(self, db: Database):
        self.db = db
        self.user_repo = UserRepository(db)

    def update_profile(
        self,
        user: User,
        name: Optional[str],
        photo: Optional[UploadFile],
        storage: PhotoStorage,
    ) -> UserResponse:
        """Update the display name and/or replace the profile photo."""
        updates: Dict[str, Any] = {}
        if name is not None and name.strip():
            updates["name"] = name.strip()

        if photo is not None and photo.filename:
            try:
                uploaded = storage.upload(
                    photo.file,
                    photo.filename,
                    folder=PHOTO_FOLDER,
                    content_type=photo.content_type,
                )
            except UnsupportedPhotoTypeError as e:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
                )
            except PhotoStorageError as e:
                logger.error("Photo update failed for user %s: %s", user.id, e)
                raise HTTPException(
                    status_code=status.HTTP_502_BAD_GATEWAY,
                    detail="Photo upload failed",
                )
            updates["photo"] = uploaded.model_dump()

        if not updates:
            return to_user_response(user)

        updated = self.user_repo.update_one(user.id, updates)

        # The old object goes only once the new reference is stored
        if "photo" in updates and user.photo and user.photo.public_id:
            self._discard_photo(storage, user.photo.public_id)
        return to_user_response(updated)

    @staticmethod
    def _discard_photo(storage: PhotoStorage, public_id: str) -> None:
        try:
            storage.destroy(public_id)
        except PhotoStorageError as e:
            logger.warning("Could not delete replaced photo %s: %s", public_id, e)

    def update_password(self, user: User, payload: UpdatePasswordRequest) -> UserResponse:
        if not verify_password(payload.old_password, user.password):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Old password is wrong"
            )
        new_password = ensure_password_length(payload.new_password)
        updated = self.user_repo.set_password(user.id, hash_password(new_password))
        logger.info("Password changed for user %s", user.id)
        return to_user_response(updated)

    def list_users(self) -> List[UserResponse]:
        """List all users"""
        return [to_user_response(user) for user in self.user_repo.list_all()]

    def update_role(self, target: User, payload: UpdateRoleRequest) -> UserResponse:
        if not payload.role:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Role is required"
            )
        updated = self.user_repo.update_one(target.id, {"role": payload.role})
        logger.info("Role of user %s set to %s", target.id, payload.role)
        return to_user_response(updated)
