from fastapi import APIRouter, Depends
from pymongo.database import Database

from app.database.mongo import get_db
from app.dtos import (
    CreateOrderRequest,
    OrderEnvelope,
    OrderListEnvelope,
    UpdateOrderStatusRequest,
)
from app.middleware.auth import get_current_user, require_admin
from app.models.entities.user import User
from app.services.order_service import OrderService
from app.services.payment_gateway import RazorpayClient, get_payment_gateway

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("", response_model=OrderEnvelope)
def create_order(
    payload: CreateOrderRequest,
    user: User = Depends(get_current_user),
    gateway: RazorpayClient = Depends(get_payment_gateway),
    db: Database = Depends(get_db),
):
    """Place an order: initiate payment, record the order, update stock."""
    service = OrderService(db)
    return OrderEnvelope(order=service.create_order(str(user.id), payload, gateway))


@router.get("", response_model=OrderListEnvelope)
def list_my_orders(
    user: User = Depends(get_current_user), db: Database = Depends(get_db)
):
    service = OrderService(db)
    return OrderListEnvelope(orders=service.list_user_orders(str(user.id)))


@router.get(
    "/admin/all",
    response_model=OrderListEnvelope,
    dependencies=[Depends(require_admin)],
)
def admin_list_orders(db: Database = Depends(get_db)):
    service = OrderService(db)
    return OrderListEnvelope(orders=service.list_all_orders())


@router.get("/{order_id}", response_model=OrderEnvelope)
def get_order(
    order_id: str,
    user: User = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    service = OrderService(db)
    return OrderEnvelope(order=service.get_user_order(order_id, user))


@router.put(
    "/{order_id}/status",
    response_model=OrderEnvelope,
    dependencies=[Depends(require_admin)],
)
def admin_update_order_status(
    order_id: str,
    payload: UpdateOrderStatusRequest,
    db: Database = Depends(get_db),
):
    service = OrderService(db)
    return OrderEnvelope(order=service.update_status(order_id, payload))
