"""Product repository, used by checkout for stock accounting"""

from typing import Optional

from bson import ObjectId
from pymongo.database import Database

from app.models.entities.product import Product
from .base import BaseRepository, CollectionName


class ProductRepository(BaseRepository[Product]):
    def __init__(self, db: Database):
        super().__init__(db, CollectionName.PRODUCTS, Product)

    def record_sale(self, product_id: str | ObjectId, quantity: int) -> Optional[Product]:
        """Move `quantity` units from stock to sold"""
        return self.increment(product_id, {"sold": quantity, "stock": -quantity})
