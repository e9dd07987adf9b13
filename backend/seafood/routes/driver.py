"""
SeaFood Delivery Backend — Driver App Routes
=============================================

What:  Everything the driver app calls: registration, going online, the
       order board, accepting and progressing orders, earnings and payouts.
How:   Order changes go through the lifecycle manager with Actor.DRIVER;
       money goes through the driver ledger.

Error mapping (handlers in main.py):
    insufficient_balance / invalid_amount → 400
    invalid_transition                   → 409
    not_found                            → 404
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Query

from seafood.dependencies import get_store
from seafood.schemas.common import Envelope, ErrorResponse
from seafood.schemas.driver import (
    BalanceEnvelope,
    DriverEnvelope,
    DriverOut,
    DriverStatusRequest,
    RegisterDriverRequest,
    StatsEnvelope,
    WithdrawalListEnvelope,
    WithdrawalOut,
    WithdrawEnvelope,
    WithdrawRequest,
)
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

router = APIRouter(prefix="/driver", tags=["Driver"])


# ── Account ───────────────────────────────────────────────────────────────

@router.post(
    "/register",
    response_model=DriverEnvelope,
    responses={400: {"description": "Email already registered", "model": ErrorResponse}},
)
async def register_driver(
    body: RegisterDriverRequest,
    store: DataStore = Depends(get_store),
) -> DriverEnvelope:
    driver = await driver_service.register(
        store,
        name=body.name,
        email=body.email,
        phone=body.phone,
        vehicle_number=body.vehicle_number,
    )
    return DriverEnvelope(message="Driver Registered", driver=DriverOut.model_validate(driver))


@router.post("/status", response_model=DriverEnvelope)
async def set_status(
    body: DriverStatusRequest,
    store: DataStore = Depends(get_store),
) -> DriverEnvelope:
    location = (body.location.latitude, body.location.longitude) if body.location else None
    driver = await driver_service.set_online_status(
        store, body.driver_id, body.is_online, location
    )
    return DriverEnvelope(driver=DriverOut.model_validate(driver))


# ── Orders ────────────────────────────────────────────────────────────────

@router.get(
    "/orders",
    response_model=OrderListEnvelope,
    summary="Open orders plus this driver's active orders",
)
async def driver_orders(
    current_driver_id: uuid.UUID = Query(alias="currentDriverId"),
    store: DataStore = Depends(get_store),
) -> OrderListEnvelope:
    orders = await order_lifecycle.orders_for_driver(store, current_driver_id)
    return OrderListEnvelope(orders=[OrderOut.model_validate(o) for o in orders])


@router.post(
    "/accept",
    response_model=OrderEnvelope,
    responses={
        404: {"description": "Order or driver not found", "model": ErrorResponse},
        409: {"description": "Order cannot be accepted", "model": ErrorResponse},
    },
)
async def accept_order(
    body: AssignmentRequest,
    store: DataStore = Depends(get_store),
) -> OrderEnvelope:
    order = await order_lifecycle.assign(
        store, body.order_id, body.driver_id, body.driver_name, Actor.DRIVER
    )
    return OrderEnvelope(message="Order Accepted", order=OrderOut.model_validate(order))


@router.post(
    "/update-order-status",
    response_model=OrderEnvelope,
    responses={
        404: {"description": "Order not found", "model": ErrorResponse},
        409: {"description": "Transition not allowed", "model": ErrorResponse},
    },
)
async def update_order_status(
    body: StatusUpdateRequest,
    store: DataStore = Depends(get_store),
) -> OrderEnvelope:
    order = await order_lifecycle.transition(store, body.order_id, body.status, Actor.DRIVER)
    return OrderEnvelope(message="Status Updated", order=OrderOut.model_validate(order))


# ── Ledger ────────────────────────────────────────────────────────────────

@router.get("/stats/{driver_id}", response_model=StatsEnvelope)
async def driver_stats(
    driver_id: uuid.UUID,
    store: DataStore = Depends(get_store),
) -> StatsEnvelope:
    stats = await driver_ledger.compute_stats(store, driver_id)
    return StatsEnvelope(
        completed_orders=stats.completed_orders,
        total_revenue=stats.total_revenue,
        earnings=stats.earnings,
    )


@router.get("/balance/{driver_id}", response_model=BalanceEnvelope)
async def driver_balance(
    driver_id: uuid.UUID,
    store: DataStore = Depends(get_store),
) -> BalanceEnvelope:
    balance = await driver_ledger.current_balance(store, driver_id)
    return BalanceEnvelope(driver_id=driver_id, balance=balance)


@router.get("/withdrawals/{driver_id}", response_model=WithdrawalListEnvelope)
async def driver_withdrawals(
    driver_id: uuid.UUID,
    store: DataStore = Depends(get_store),
) -> WithdrawalListEnvelope:
    withdrawals = await driver_ledger.withdrawal_history(store, driver_id)
    return WithdrawalListEnvelope(
        withdrawals=[WithdrawalOut.model_validate(w) for w in withdrawals]
    )


@router.post(
    "/withdraw",
    response_model=WithdrawEnvelope,
    responses={
        400: {"description": "Insufficient balance or invalid amount", "model": ErrorResponse},
        404: {"description": "Driver not found", "model": ErrorResponse},
    },
)
async def withdraw(
    body: WithdrawRequest,
    store: DataStore = Depends(get_store),
) -> WithdrawEnvelope:
    result = await driver_ledger.request_withdrawal(
        store, body.driver_id, body.amount, body.upi_id
    )
    return WithdrawEnvelope(
        message="Withdrawal Successful",
        new_balance=result.new_balance,
        withdrawal=WithdrawalOut.model_validate(result.withdrawal),
    )
