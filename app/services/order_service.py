"""Checkout and order management"""

from __future__ import annotations

import logging
import uuid
from typing import List

from fastapi import HTTPException, status
from pymongo.database import Database
from pymongo.errors import PyMongoError

from app.dtos import CreateOrderRequest, OrderResponse, UpdateOrderStatusRequest
from app.models.entities.order import Order, PaymentInfo
from app.models.entities.user import User
from app.repositories.order import OrderRepository
from app.repositories.product import ProductRepository
from app.services.exceptions import PaymentGatewayError
from app.services.payment_gateway import RazorpayClient

logger = logging.getLogger(__name__)


def to_order_response(order: Order) -> OrderResponse:
    return OrderResponse.model_validate(order.model_dump(by_alias=True))


class OrderService:
    def __init__(self, db: Database):
        self.db = db
        self.order_repo = OrderRepository(db)
        self.product_repo = ProductRepository(db)

    def create_order(
        self, user_id: str, payload: CreateOrderRequest, gateway: RazorpayClient
    ) -> OrderResponse:
        """
        Charge the payment provider, record the order, then move the ordered
        quantities from stock to sold.

        The steps are sequential and are not rolled back: if recording the
        order or a stock update fails after the charge succeeded, the payment
        stays with the provider.
        """
        shipping = payload.shipping_info.model_dump()
        receipt = uuid.uuid4().hex
        try:
            payment = gateway.charge(payload.total_amount, receipt, notes=shipping)
        except PaymentGatewayError as e:
            logger.error("Payment initiation failed for user %s: %s", user_id, e)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Payment could not be initiated",
            )

        order = Order(
            user=user_id,
            shipping_info=shipping,
            order_items=[item.model_dump() for item in payload.order_items],
            total_amount=payload.total_amount,
            payment_info=PaymentInfo(**payment.model_dump()),
        )
        try:
            created = self.order_repo.insert_one(order)
        except PyMongoError:
            logger.exception(
                "Could not record order for user %s after payment %s", user_id, payment.id
            )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Order failed. Amount will be refunded",
            )
        logger.info(
            "Order %s created for user %s (payment %s)", created.id, user_id, payment.id
        )

        for item in created.order_items:
            product = self.product_repo.record_sale(item.product_id, item.quantity)
            if product is None:
                logger.warning(
                    "Order %s references unknown product %s; stock not updated",
                    created.id,
                    item.product_id,
                )

        return to_order_response(created)

    def get_order(self, order_id: str) -> Order:
        order = self.order_repo.find_by_id(order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Order not found"
            )
        return order

    def get_user_order(self, order_id: str, user: User) -> OrderResponse:
        """Return an order only to the user who placed it."""
        order = self.get_order(order_id)
        if order.user != user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized user"
            )
        return to_order_response(order)

    def list_user_orders(self, user_id: str) -> List[OrderResponse]:
        return [to_order_response(o) for o in self.order_repo.list_by_user(user_id)]

    def list_all_orders(self) -> List[OrderResponse]:
        return [to_order_response(o) for o in self.order_repo.list_all()]

    def update_status(
        self, order_id: str, payload: UpdateOrderStatusRequest
    ) -> OrderResponse:
        if not payload.order_status:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Order status is required",
            )
        order = self.get_order(order_id)
        updated = self.order_repo.update_status(order.id, payload.order_status.value)
        logger.info("Order %s moved to %s", order.id, payload.order_status.value)
        return to_order_response(updated)
