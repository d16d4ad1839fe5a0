"""User repository for database operations"""

from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from pymongo.database import Database

from app.models.entities.user import User
from .base import BaseRepository, CollectionName


class UserRepository(BaseRepository[User]):
    """Repository for user entities"""

    def __init__(self, db: Database):
        super().__init__(db, CollectionName.USERS, User)

    def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by email"""
        return self.find_one({"email": email})

    def find_by_verify_token(self, token: str) -> Optional[User]:
        return self.find_one({"verify_token": token})

    def find_with_active_reset(self, user_id: str | ObjectId) -> Optional[User]:
        """Find a user whose password reset window has not yet closed"""
        identifier = self._to_object_id(user_id)
        if identifier is None:
            return None
        return self.find_one(
            {
                "_id": identifier,
                "reset_password_expires": {"$gt": datetime.now(timezone.utc)},
            }
        )

    def list_all(self) -> List[User]:
        """List all users sorted by creation date"""
        return self.find_many({}, sort=[("created_at", -1)])

    def create_user(
        self, name: str, email: str, password_hash: str, verify_token: str
    ) -> User:
        """Create a new user"""
        user = User(
            name=name,
            email=email,
            password=password_hash,
            verify_token=verify_token,
        )
        return self.insert_one(user)

    def record_login(self, user_id: str | ObjectId) -> Optional[User]:
        """Count a successful sign-in"""
        return self.increment(user_id, {"login_count": 1})

    def mark_verified(self, user_id: str | ObjectId) -> Optional[User]:
        return self.update_one(user_id, {"is_verified": True}, unset=["verify_token"])

    def set_reset_token(
        self, user_id: str | ObjectId, token: str, expires_at: datetime
    ) -> Optional[User]:
        return self.update_one(
            user_id,
            {"reset_password_token": token, "reset_password_expires": expires_at},
        )

    def set_password(
        self, user_id: str | ObjectId, password_hash: str
    ) -> Optional[User]:
        """Store a new password hash and drop any outstanding reset token"""
        return self.update_one(
            user_id,
            {"password": password_hash},
            unset=["reset_password_token", "reset_password_expires"],
        )
