"""Order entity - a persisted checkout with its payment and shipping snapshot"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import BaseEntity, PyObjectId


class OrderStatus(str, Enum):
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class ShippingInfo(BaseModel):
    address: str
    city: str
    phone_no: str
    postal_code: str
    state: str
    country: Optional[str] = None


class OrderItem(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    product_id: PyObjectId
    name: Optional[str] = None
    quantity: int = Field(..., ge=1)
    price: Optional[float] = None


class PaymentInfo(BaseModel):
    id: str
    receipt: str
    status: str


class Order(BaseEntity):
    user: PyObjectId
    shipping_info: ShippingInfo
    order_items: List[OrderItem]
    total_amount: float
    payment_info: PaymentInfo
    order_status: OrderStatus = OrderStatus.PROCESSING.value

    model_config = ConfigDict(use_enum_values=True)
