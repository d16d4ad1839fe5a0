"""Data Transfer Objects (DTOs) for API requests and responses"""

from .auth import (
    MessageResponse,
    RecoverPasswordRequest,
    ResetPasswordRequest,
    SigninRequest,
    SigninResponse,
    SignupRequest,
)
from .order import (
    CreateOrderRequest,
    OrderEnvelope,
    OrderListEnvelope,
    OrderResponse,
    UpdateOrderStatusRequest,
)
from .user import (
    UpdatePasswordRequest,
    UpdateRoleRequest,
    UserEnvelope,
    UserListEnvelope,
    UserResponse,
)

__all__ = [
    # Auth
    "MessageResponse",
    "RecoverPasswordRequest",
    "ResetPasswordRequest",
    "SigninRequest",
    "SigninResponse",
    "SignupRequest",
    # Order
    "CreateOrderRequest",
    "OrderEnvelope",
    "OrderListEnvelope",
    "OrderResponse",
    "UpdateOrderStatusRequest",
    # User
    "UpdatePasswordRequest",
    "UpdateRoleRequest",
    "UserEnvelope",
    "UserListEnvelope",
    "UserResponse",
]
