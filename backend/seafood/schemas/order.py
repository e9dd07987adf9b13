"""
SeaFood Delivery Backend — Order Schemas
=========================================

Requests and responses for order creation, tracking, listing, status
changes and driver assignment.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from seafood.models import OrderStatus
from seafood.schemas.common import CamelModel, Envelope, Money


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CreateOrderRequest(CamelModel):
    user_email: str = Field(min_length=3, description="Customer email")
    items: List[Dict[str, Any]] = Field(default_factory=list, description="Cart snapshot")
    total_amount: Money = Field(
        ge=0,
        max_digits=12,
        decimal_places=2,
        description="Order total, fixed at creation",
    )
    address: Dict[str, Any] = Field(default_factory=dict, description="Delivery address snapshot")
    payment_method: Optional[str] = Field(default=None, description="e.g. COD, UPI")


class AssignmentRequest(CamelModel):
    """Body of POST /driver/accept and POST /admin/assign-driver."""

    order_id: uuid.UUID
    driver_id: uuid.UUID
    driver_name: Optional[str] = Field(
        default=None,
        description="Display name; defaults to the driver's registered name",
    )


class StatusUpdateRequest(CamelModel):
    """Body of POST /driver/update-order-status and POST /admin/order-status."""

    order_id: uuid.UUID
    status: OrderStatus = Field(description="Target status, e.g. 'Out for Delivery'")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class OrderOut(CamelModel):
    id: uuid.UUID
    user_email: str
    items: List[Any]
    total_amount: Money
    address: Dict[str, Any]
    payment_method: Optional[str] = None
    status: str
    driver_id: Optional[uuid.UUID] = None
    driver_name: Optional[str] = None
    created_at: datetime


class OrderEnvelope(Envelope):
    order: OrderOut


class CreatedOrderEnvelope(Envelope):
    order_id: uuid.UUID
    order: OrderOut


class OrderListEnvelope(Envelope):
    orders: List[OrderOut]
