"""
SeaFood Delivery Backend — Customer Order Routes
=================================================

What:  Checkout and order tracking for the customer app.
"""

import logging
import uuid

from fastapi import APIRouter, Depends

from seafood.dependencies import get_store
from seafood.schemas.common import ErrorResponse
from seafood.schemas.order import (
    CreatedOrderEnvelope,
    CreateOrderRequest,
    OrderEnvelope,
    OrderListEnvelope,
    OrderOut,
)
from seafood.services.catalog_service import catalog_service
from seafood.services.order_lifecycle import order_lifecycle
from seafood.services.store_base import DataStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Orders"])


@router.post(
    "/create-order",
    response_model=CreatedOrderEnvelope,
    summary="Place a new order",
)
async def create_order(
    body: CreateOrderRequest,
    store: DataStore = Depends(get_store),
) -> CreatedOrderEnvelope:
    order = await catalog_service.create_order(
        store,
        user_email=body.user_email,
        items=body.items,
        total_amount=body.total_amount,
        address=body.address,
        payment_method=body.payment_method,
    )
    return CreatedOrderEnvelope(
        message="Order placed",
        order_id=order.id,
        order=OrderOut.model_validate(order),
    )


@router.get(
    "/track-order/{order_id}",
    response_model=OrderEnvelope,
    responses={404: {"description": "Order not found", "model": ErrorResponse}},
    summary="Get one order with its current status and driver",
)
async def track_order(
    order_id: uuid.UUID,
    store: DataStore = Depends(get_store),
) -> OrderEnvelope:
    order = await order_lifecycle.get_order(store, order_id)
    return OrderEnvelope(order=OrderOut.model_validate(order))


@router.get(
    "/my-orders/{email}",
    response_model=OrderListEnvelope,
    summary="A customer's orders, newest first",
)
async def my_orders(
    email: str,
    store: DataStore = Depends(get_store),
) -> OrderListEnvelope:
    orders = await order_lifecycle.orders_for_user(store, email)
    return OrderListEnvelope(orders=[OrderOut.model_validate(o) for o in orders])
