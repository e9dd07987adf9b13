"""
SeaFood Delivery Backend — Order Lifecycle Manager
===================================================

What:  Validates and applies order status changes and driver assignment.
Why:   Both the driver app and the admin console change order status. Routing
       both through one state machine keeps the rules identical for each.
How:   Pure helpers (ALLOWED_TRANSITIONS, check_transition) decide; the
       OrderLifecycleManager fetches, checks, and writes through a DataStore
       with a compare-and-swap on the status it validated against.

State machine:

    Placed ──▶ Preparing ──▶ Out for Delivery ──▶ Delivered
      │            │                 │
      └────────────┴─────────────────┴──────────▶ Cancelled

    Delivered and Cancelled are terminal. Reaching Delivered also requires
    a driver on the order.

Assignment:
    driver self-accept:  Placed → Preparing (order must not belong to another driver)
    admin assign:        any non-terminal → Out for Delivery (skips preparation,
                         also used to hand the order to a different driver)
"""

import enum
import logging
import uuid
from typing import Dict, FrozenSet, List, Optional

from seafood.exceptions import InvalidTransitionError, NotFoundError
from seafood.models import Order, OrderStatus
from seafood.services.store_base import DataStore, OrderFilter

logger = logging.getLogger(__name__)


class Actor(str, enum.Enum):
    """Who is asking for a change. Decides the assignment entry point."""

    DRIVER = "driver"
    ADMIN = "admin"


ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PLACED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED}),
    OrderStatus.OUT_FOR_DELIVERY: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

# Statuses a driver still has work to do on
ACTIVE_DRIVER_STATUSES = (OrderStatus.PREPARING, OrderStatus.OUT_FOR_DELIVERY)


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def check_transition(order: Order, target: OrderStatus) -> None:
    """
    Raise InvalidTransitionError unless `order` may move to `target`.

    Pure: reads the order, writes nothing.
    """
    current = OrderStatus(order.status)
    if current.is_terminal:
        raise InvalidTransitionError(
            current=current.value,
            target=target.value,
            reason=f"order is already {current.value.lower()}",
        )
    if not can_transition(current, target):
        raise InvalidTransitionError(current=current.value, target=target.value)
    if target is OrderStatus.DELIVERED and order.driver_id is None:
        raise InvalidTransitionError(
            current=current.value,
            target=target.value,
            reason="no driver is assigned",
        )


def newest_first(orders: List[Order]) -> List[Order]:
    return sorted(orders, key=lambda o: o.created_at, reverse=True)


class OrderLifecycleManager:
    """
    Stateless service; the DataStore is passed in on every call.

    Every successful change is one update_order() plus commit. No change
    touches more than one order.
    """

    async def get_order(self, store: DataStore, order_id: uuid.UUID) -> Order:
        order = await store.get_order(order_id)
        if order is None:
            raise NotFoundError(resource="order", resource_id=str(order_id))
        return order

    async def transition(
        self,
        store: DataStore,
        order_id: uuid.UUID,
        target: OrderStatus,
        actor: Actor,
    ) -> Order:
        """
        Move an order to `target` along an allowed edge.

        Raises:
            NotFoundError: order_id does not resolve
            InvalidTransitionError: edge not allowed, or the order changed
                between the check and the write
        """
        order = await self.get_order(store, order_id)
        current = OrderStatus(order.status)

        try:
            check_transition(order, target)
        except InvalidTransitionError:
            logger.warning(
                "Rejected %s transition for order %s: %s -> %s",
                actor.value, order_id, current.value, target.value,
            )
            raise

        updated = await store.update_order(
            order_id,
            {"status": target.value},
            expected_status=current,
        )
        await store.commit()
        logger.info(
            "Order %s moved %s -> %s by %s",
            order_id, current.value, target.value, actor.value,
        )
        return updated

    async def assign(
        self,
        store: DataStore,
        order_id: uuid.UUID,
        driver_id: uuid.UUID,
        driver_name: Optional[str],
        actor: Actor,
    ) -> Order:
        """
        Attach a driver to an order.

        Driver self-accept lands in Preparing; admin assignment lands in
        Out for Delivery. driver_name defaults to the registered name.

        Raises:
            NotFoundError: order or driver does not resolve
            InvalidTransitionError: order is terminal, or (driver path) not
                Placed or held by someone else
        """
        order = await self.get_order(store, order_id)
        driver = await store.get_driver(driver_id)
        if driver is None:
            raise NotFoundError(resource="driver", resource_id=str(driver_id))

        current = OrderStatus(order.status)
        if actor is Actor.DRIVER:
            target = OrderStatus.PREPARING
        else:
            target = OrderStatus.OUT_FOR_DELIVERY

        if current.is_terminal:
            logger.warning("Rejected assignment of closed order %s (%s)", order_id, current.value)
            raise InvalidTransitionError(
                current=current.value,
                target=target.value,
                reason=f"order is already {current.value.lower()}",
            )

        if actor is Actor.DRIVER:
            if order.driver_id is not None and order.driver_id != driver_id:
                raise InvalidTransitionError(
                    current=current.value,
                    target=target.value,
                    reason="order is already assigned to another driver",
                )
            if not can_transition(current, target):
                raise InvalidTransitionError(current=current.value, target=target.value)

        updated = await store.update_order(
            order_id,
            {
                "driver_id": driver_id,
                "driver_name": driver_name or driver.name,
                "status": target.value,
            },
            expected_status=current,
        )
        await store.commit()
        logger.info(
            "Order %s assigned to driver %s by %s (%s -> %s)",
            order_id, driver_id, actor.value, current.value, target.value,
        )
        return updated

    # ── Listings ──────────────────────────────────────────────────────────

    async def orders_for_driver(self, store: DataStore, driver_id: uuid.UUID) -> List[Order]:
        """Open orders anyone can accept, plus this driver's active orders."""
        orders = await store.find_orders(
            OrderFilter(statuses=(OrderStatus.PLACED,), unassigned=True),
            OrderFilter(driver_id=driver_id, statuses=ACTIVE_DRIVER_STATUSES),
        )
        return newest_first(orders)

    async def orders_for_user(self, store: DataStore, user_email: str) -> List[Order]:
        return newest_first(await store.find_orders(OrderFilter(user_email=user_email)))

    async def all_orders(self, store: DataStore) -> List[Order]:
        return newest_first(await store.find_orders())


order_lifecycle = OrderLifecycleManager()
