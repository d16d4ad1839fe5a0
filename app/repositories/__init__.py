"""Repository layer for database operations"""

from .base import BaseRepository, CollectionName
from .order import OrderRepository
from .product import ProductRepository
from .user import UserRepository

__all__ = [
    "BaseRepository",
    "CollectionName",
    "OrderRepository",
    "ProductRepository",
    "UserRepository",
]
