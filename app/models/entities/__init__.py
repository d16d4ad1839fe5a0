from .base import BaseEntity, PyObjectId, PyObjectIdStr
from .order import Order, OrderItem, OrderStatus, PaymentInfo, ShippingInfo
from .product import Product
from .user import Photo, User, UserRole

__all__ = [
    "BaseEntity",
    "PyObjectId",
    "PyObjectIdStr",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentInfo",
    "ShippingInfo",
    "Product",
    "Photo",
    "User",
    "UserRole",
]
