"""
SeaFood Delivery Backend — Admin Console Routes
================================================

What:  Read-everything listings plus the two admin order overrides.
How:   Overrides run through the same lifecycle manager as the driver app,
       with Actor.ADMIN. Admin assignment is the fast path straight to
       Out for Delivery.
"""

import logging

from fastapi import APIRouter, Depends

from seafood.dependencies import get_store
from seafood.schemas.common import ErrorResponse
from seafood.schemas.driver import DriverListEnvelope, DriverOut, WithdrawalListEnvelope, WithdrawalOut
from seafood.schemas.order import (
    AssignmentRequest,
    OrderEnvelope,
    OrderListEnvelope,
    OrderOut,
    StatusUpdateRequest,
)
from seafood.services.driver_ledger import driver_ledger
from seafood.services.driver_service import driver_service
from seafood.services.order_lifecycle import Actor, order_lifecycle
from seafood.services.store_base import DataStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/orders", response_model=OrderListEnvelope)
async def all_orders(store: DataStore = Depends(get_store)) -> OrderListEnvelope:
    orders = await order_lifecycle.all_orders(store)
    return OrderListEnvelope(orders=[OrderOut.model_validate(o) for o in orders])


@router.get("/drivers", response_model=DriverListEnvelope)
async def all_drivers(store: DataStore = Depends(get_store)) -> DriverListEnvelope:
    drivers = await driver_service.list_drivers(store)
    return DriverListEnvelope(drivers=[DriverOut.model_validate(d) for d in drivers])


@router.get("/withdrawals", response_model=WithdrawalListEnvelope)
async def all_withdrawals(store: DataStore = Depends(get_store)) -> WithdrawalListEnvelope:
    withdrawals = await driver_ledger.all_withdrawals(store)
    return WithdrawalListEnvelope(
        withdrawals=[WithdrawalOut.model_validate(w) for w in withdrawals]
    )


@router.post(
    "/order-status",
    response_model=OrderEnvelope,
    responses={
        404: {"description": "Order not found", "model": ErrorResponse},
        409: {"description": "Transition not allowed", "model": ErrorResponse},
    },
)
async def override_order_status(
    body: StatusUpdateRequest,
    store: DataStore = Depends(get_store),
) -> OrderEnvelope:
    order = await order_lifecycle.transition(store, body.order_id, body.status, Actor.ADMIN)
    return OrderEnvelope(message="Status Updated", order=OrderOut.model_validate(order))


@router.post(
    "/assign-driver",
    response_model=OrderEnvelope,
    responses={
        404: {"description": "Order or driver not found", "model": ErrorResponse},
        409: {"description": "Order is closed", "model": ErrorResponse},
    },
)
async def assign_driver(
    body: AssignmentRequest,
    store: DataStore = Depends(get_store),
) -> OrderEnvelope:
    order = await order_lifecycle.assign(
        store, body.order_id, body.driver_id, body.driver_name, Actor.ADMIN
    )
    return OrderEnvelope(message="Driver Assigned", order=OrderOut.model_validate(order))
