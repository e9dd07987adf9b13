"""
SeaFood Delivery Backend — Order Lifecycle Unit Tests
======================================================

What:  Tests for the status state machine and driver assignment.
How:   Uses the in-memory store (no database).

What we test:
    ✅ Allowed edges succeed, every other edge is rejected
    ✅ Nothing leaves Delivered or Cancelled
    ✅ Delivered requires a driver
    ✅ Driver accept → Preparing, admin assign → Out for Delivery
    ✅ Assignment on closed orders and on other drivers' orders is rejected
    ✅ Listings filter and sort newest first
"""

import uuid
from decimal import Decimal

import pytest

from seafood.exceptions import InvalidTransitionError, NotFoundError
from seafood.models import OrderStatus
from seafood.services.order_lifecycle import (
    ALLOWED_TRANSITIONS,
    Actor,
    can_transition,
    check_transition,
)

from tests.fakes import add_driver, add_order


class TestTransitionRules:
    """Pure rule checks, no store involved."""

    @pytest.mark.parametrize("terminal", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_terminal_states_have_no_exits(self, terminal):
        assert ALLOWED_TRANSITIONS[terminal] == frozenset()
        for target in OrderStatus:
            assert can_transition(terminal, target) is False

    def test_every_non_terminal_state_can_cancel(self):
        for status in OrderStatus:
            if not status.is_terminal:
                assert can_transition(status, OrderStatus.CANCELLED)

    def test_forward_path(self):
        assert can_transition(OrderStatus.PLACED, OrderStatus.PREPARING)
        assert can_transition(OrderStatus.PREPARING, OrderStatus.OUT_FOR_DELIVERY)
        assert can_transition(OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED)

    def test_no_skipping_or_going_back(self):
        assert not can_transition(OrderStatus.PLACED, OrderStatus.OUT_FOR_DELIVERY)
        assert not can_transition(OrderStatus.PLACED, OrderStatus.DELIVERED)
        assert not can_transition(OrderStatus.OUT_FOR_DELIVERY, OrderStatus.PREPARING)
        assert not can_transition(OrderStatus.PREPARING, OrderStatus.PREPARING)

    def test_delivered_requires_driver(self, memory_store):
        order = add_order(memory_store, status=OrderStatus.OUT_FOR_DELIVERY)
        with pytest.raises(InvalidTransitionError, match="no driver"):
            check_transition(order, OrderStatus.DELIVERED)


class TestTransition:
    @pytest.mark.asyncio
    async def test_walks_the_happy_path(self, memory_store, lifecycle, driver):
        order = add_order(memory_store, status=OrderStatus.PLACED, driver_id=driver.id)

        for target in (
            OrderStatus.PREPARING,
            OrderStatus.OUT_FOR_DELIVERY,
            OrderStatus.DELIVERED,
        ):
            updated = await lifecycle.transition(memory_store, order.id, target, Actor.DRIVER)
            assert updated.status == target.value

        assert memory_store.commits == 3

    @pytest.mark.asyncio
    async def test_placed_to_delivered_is_rejected(self, memory_store, lifecycle, driver):
        order = add_order(memory_store, status=OrderStatus.PLACED, driver_id=driver.id)

        with pytest.raises(InvalidTransitionError) as exc_info:
            await lifecycle.transition(memory_store, order.id, OrderStatus.DELIVERED, Actor.DRIVER)

        assert exc_info.value.current == "Placed"
        assert exc_info.value.target == "Delivered"
        assert memory_store.orders[order.id].status == "Placed"
        assert memory_store.commits == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("terminal", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    @pytest.mark.parametrize("actor", [Actor.DRIVER, Actor.ADMIN])
    async def test_terminal_orders_never_move(self, memory_store, lifecycle, driver, terminal, actor):
        order = add_order(memory_store, status=terminal, driver_id=driver.id)

        for target in OrderStatus:
            with pytest.raises(InvalidTransitionError):
                await lifecycle.transition(memory_store, order.id, target, actor)

        assert memory_store.orders[order.id].status == terminal.value

    @pytest.mark.asyncio
    async def test_admin_cancel_from_out_for_delivery(self, memory_store, lifecycle, driver):
        order = add_order(memory_store, status=OrderStatus.OUT_FOR_DELIVERY, driver_id=driver.id)

        updated = await lifecycle.transition(
            memory_store, order.id, OrderStatus.CANCELLED, Actor.ADMIN
        )

        assert updated.status == "Cancelled"

    @pytest.mark.asyncio
    async def test_unknown_order_raises_not_found(self, memory_store, lifecycle):
        with pytest.raises(NotFoundError):
            await lifecycle.transition(
                memory_store, uuid.uuid4(), OrderStatus.PREPARING, Actor.ADMIN
            )

    @pytest.mark.asyncio
    async def test_status_changed_underneath_is_rejected(self, memory_store, lifecycle, driver):
        """The write is a compare-and-swap on the status that was validated."""
        order = add_order(memory_store, status=OrderStatus.PREPARING, driver_id=driver.id)
        original_update = memory_store.update_order

        async def racing_update(order_id, patch, expected_status=None):
            # Another request cancels between our check and our write
            memory_store.orders[order_id].status = OrderStatus.CANCELLED.value
            return await original_update(order_id, patch, expected_status)

        memory_store.update_order = racing_update

        with pytest.raises(InvalidTransitionError):
            await lifecycle.transition(
                memory_store, order.id, OrderStatus.OUT_FOR_DELIVERY, Actor.DRIVER
            )
        assert memory_store.orders[order.id].status == "Cancelled"


class TestAssign:
    @pytest.mark.asyncio
    async def test_driver_accept_moves_to_preparing(self, memory_store, lifecycle, driver):
        order = add_order(memory_store, status=OrderStatus.PLACED)

        updated = await lifecycle.assign(memory_store, order.id, driver.id, "Ravi K", Actor.DRIVER)

        assert updated.status == "Preparing"
        assert updated.driver_id == driver.id
        assert updated.driver_name == "Ravi K"

    @pytest.mark.asyncio
    async def test_admin_assign_is_fast_path_to_out_for_delivery(self, memory_store, lifecycle, driver):
        order = add_order(memory_store, status=OrderStatus.PLACED)

        updated = await lifecycle.assign(memory_store, order.id, driver.id, None, Actor.ADMIN)

        assert updated.status == "Out for Delivery"
        assert updated.driver_id == driver.id
        # Falls back to the registered name
        assert updated.driver_name == driver.name

    @pytest.mark.asyncio
    async def test_admin_can_reassign_in_flight_order(self, memory_store, lifecycle, driver):
        other = add_driver(memory_store, name="Meera")
        order = add_order(memory_store, status=OrderStatus.OUT_FOR_DELIVERY, driver_id=driver.id)

        updated = await lifecycle.assign(memory_store, order.id, other.id, None, Actor.ADMIN)

        assert updated.driver_id == other.id
        assert updated.status == "Out for Delivery"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("actor", [Actor.DRIVER, Actor.ADMIN])
    async def test_assign_on_delivered_order_is_rejected(self, memory_store, lifecycle, driver, actor):
        order = add_order(memory_store, status=OrderStatus.DELIVERED, driver_id=driver.id)
        other = add_driver(memory_store, name="Meera")

        with pytest.raises(InvalidTransitionError, match="already delivered"):
            await lifecycle.assign(memory_store, order.id, other.id, None, actor)

        assert memory_store.orders[order.id].driver_id == driver.id

    @pytest.mark.asyncio
    async def test_driver_cannot_take_another_drivers_order(self, memory_store, lifecycle, driver):
        other = add_driver(memory_store, name="Meera")
        order = add_order(memory_store, status=OrderStatus.PREPARING, driver_id=driver.id)

        with pytest.raises(InvalidTransitionError, match="another driver"):
            await lifecycle.assign(memory_store, order.id, other.id, None, Actor.DRIVER)

    @pytest.mark.asyncio
    async def test_driver_cannot_accept_twice(self, memory_store, lifecycle, driver):
        order = add_order(memory_store, status=OrderStatus.PLACED)
        await lifecycle.assign(memory_store, order.id, driver.id, None, Actor.DRIVER)

        with pytest.raises(InvalidTransitionError):
            await lifecycle.assign(memory_store, order.id, driver.id, None, Actor.DRIVER)

    @pytest.mark.asyncio
    async def test_unknown_driver_raises_not_found(self, memory_store, lifecycle):
        order = add_order(memory_store, status=OrderStatus.PLACED)

        with pytest.raises(NotFoundError):
            await lifecycle.assign(memory_store, order.id, uuid.uuid4(), None, Actor.ADMIN)

        assert memory_store.orders[order.id].driver_id is None

    @pytest.mark.asyncio
    async def test_unknown_order_raises_not_found(self, memory_store, lifecycle, driver):
        with pytest.raises(NotFoundError):
            await lifecycle.assign(memory_store, uuid.uuid4(), driver.id, None, Actor.DRIVER)


class TestListings:
    @pytest.mark.asyncio
    async def test_driver_board_shows_open_and_own_active_orders(self, memory_store, lifecycle, driver):
        other = add_driver(memory_store, name="Meera")
        open_order = add_order(memory_store, status=OrderStatus.PLACED)
        mine_preparing = add_order(memory_store, status=OrderStatus.PREPARING, driver_id=driver.id)
        mine_out = add_order(memory_store, status=OrderStatus.OUT_FOR_DELIVERY, driver_id=driver.id)
        add_order(memory_store, status=OrderStatus.DELIVERED, driver_id=driver.id)
        add_order(memory_store, status=OrderStatus.PREPARING, driver_id=other.id)
        add_order(memory_store, status=OrderStatus.CANCELLED)

        orders = await lifecycle.orders_for_driver(memory_store, driver.id)

        assert [o.id for o in orders] == [mine_out.id, mine_preparing.id, open_order.id]

    @pytest.mark.asyncio
    async def test_orders_for_user_newest_first(self, memory_store, lifecycle):
        first = add_order(memory_store, user_email="asha@example.com")
        add_order(memory_store, user_email="someone@example.com")
        second = add_order(memory_store, user_email="asha@example.com")

        orders = await lifecycle.orders_for_user(memory_store, "asha@example.com")

        assert [o.id for o in orders] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_all_orders(self, memory_store, lifecycle):
        created = [add_order(memory_store, Decimal(n)) for n in (100, 200, 300)]

        orders = await lifecycle.all_orders(memory_store)

        assert [o.id for o in orders] == [o.id for o in reversed(created)]
