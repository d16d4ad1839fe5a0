"""Order repository for database operations"""

from typing import List, Optional

from bson import ObjectId
from pymongo.database import Database

from app.models.entities.order import Order
from .base import BaseRepository, CollectionName


class OrderRepository(BaseRepository[Order]):
    """Repository for order entities"""

    def __init__(self, db: Database):
        super().__init__(db, CollectionName.ORDERS, Order)

    def list_by_user(self, user_id: str | ObjectId) -> List[Order]:
        """List a user's orders, newest first"""
        identifier = self._to_object_id(user_id)
        if identifier is None:
            return []
        return self.find_many({"user": identifier}, sort=[("created_at", -1)])

    def list_all(self) -> List[Order]:
        return self.find_many({}, sort=[("created_at", -1)])

    def update_status(self, order_id: str | ObjectId, status: str) -> Optional[Order]:
        return self.update_one(order_id, {"order_status": status})
