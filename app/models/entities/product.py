from typing import Optional

from .base import BaseEntity


class Product(BaseEntity):
    name: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None
    stock: int = 0
    sold: int = 0
