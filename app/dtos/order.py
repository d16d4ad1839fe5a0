"""Order DTOs"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.entities.base import PyObjectIdStr
from app.models.entities.order import OrderStatus, PaymentInfo


class ShippingInfoIn(BaseModel):
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    phone_no: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    country: Optional[str] = None


class OrderItemIn(BaseModel):
    product_id: PyObjectIdStr
    name: Optional[str] = None
    quantity: int = Field(..., ge=1)
    price: Optional[float] = Field(None, ge=0)


class CreateOrderRequest(BaseModel):
    shipping_info: ShippingInfoIn
    order_items: List[OrderItemIn] = Field(..., min_length=1)
    total_amount: float = Field(..., gt=0)


class UpdateOrderStatusRequest(BaseModel):
    order_status: Optional[OrderStatus] = None


class OrderItemResponse(BaseModel):
    product_id: PyObjectIdStr
    name: Optional[str] = None
    quantity: int
    price: Optional[float] = None


class OrderResponse(BaseModel):
    id: PyObjectIdStr = Field(..., alias="_id")
    user: PyObjectIdStr
    shipping_info: ShippingInfoIn
    order_items: List[OrderItemResponse]
    total_amount: float
    payment_info: PaymentInfo
    order_status: OrderStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)


class OrderEnvelope(BaseModel):
    success: bool = True
    order: OrderResponse


class OrderListEnvelope(BaseModel):
    success: bool = True
    orders: List[OrderResponse]
