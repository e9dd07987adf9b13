"""
SeaFood Delivery Backend — SQLAlchemy Store Tests
==================================================

What:  Tests for SqlAlchemyStore queries, filters and error mapping.
How:   Runs against an in-memory SQLite database (aiosqlite) created from
       the ORM metadata. Row locks are a no-op on SQLite; locking
       behaviour is covered by the ledger tests.

What we test:
    ✅ OR-combined order filters and newest-first ordering
    ✅ update_order compare-and-swap and NotFound
    ✅ Duplicate driver email → ValidationError
    ✅ Withdrawal filters
    ✅ The ledger and lifecycle work unchanged on the SQL store
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from seafood.exceptions import (
    InsufficientBalanceError,
    InvalidTransitionError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from seafood.models import Driver, Order, OrderStatus, Withdrawal, WithdrawalStatus
from seafood.seed import SEED_PRODUCTS, seed_products
from seafood.services.driver_ledger import DriverLedger, DriverLocks
from seafood.services.order_lifecycle import Actor, OrderLifecycleManager
from seafood.services.store_base import OrderFilter, WithdrawalFilter

_T0 = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


async def _driver(store, email="ravi@example.com", name="Ravi"):
    driver = await store.insert_driver(
        Driver(
            id=uuid.uuid4(),
            name=name,
            email=email,
            phone="9876543210",
            is_online=False,
            latitude=0.0,
            longitude=0.0,
        )
    )
    await store.commit()
    return driver


async def _order(store, minutes, status=OrderStatus.PLACED, driver_id=None,
                 total=Decimal("500"), user_email="asha@example.com"):
    order = await store.insert_order(
        Order(
            id=uuid.uuid4(),
            user_email=user_email,
            items=[{"name": "Pomfret", "qty": 1}],
            total_amount=total,
            address={"city": "Kochi"},
            payment_method="COD",
            status=status.value,
            driver_id=driver_id,
            created_at=_T0 + timedelta(minutes=minutes),
        )
    )
    await store.commit()
    return order


class TestOrders:
    @pytest.mark.asyncio
    async def test_find_orders_without_filters_is_newest_first(self, sql_store):
        first = await _order(sql_store, 1)
        second = await _order(sql_store, 2)

        orders = await sql_store.find_orders()

        assert [o.id for o in orders] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_filters_are_or_combined(self, sql_store):
        driver = await _driver(sql_store)
        other = await _driver(sql_store, email="meera@example.com", name="Meera")
        open_order = await _order(sql_store, 1)
        mine = await _order(sql_store, 2, OrderStatus.PREPARING, driver.id)
        await _order(sql_store, 3, OrderStatus.PREPARING, other.id)
        await _order(sql_store, 4, OrderStatus.DELIVERED, driver.id)

        orders = await sql_store.find_orders(
            OrderFilter(statuses=(OrderStatus.PLACED,), unassigned=True),
            OrderFilter(driver_id=driver.id, statuses=(OrderStatus.PREPARING,)),
        )

        assert [o.id for o in orders] == [mine.id, open_order.id]

    @pytest.mark.asyncio
    async def test_filter_by_email(self, sql_store):
        mine = await _order(sql_store, 1)
        await _order(sql_store, 2, user_email="someone@example.com")

        orders = await sql_store.find_orders(OrderFilter(user_email="asha@example.com"))

        assert [o.id for o in orders] == [mine.id]

    @pytest.mark.asyncio
    async def test_update_order_compare_and_swap(self, sql_store):
        order = await _order(sql_store, 1)
        await sql_store.update_order(
            order.id, {"status": OrderStatus.CANCELLED.value}, expected_status=OrderStatus.PLACED
        )
        await sql_store.commit()

        with pytest.raises(InvalidTransitionError):
            await sql_store.update_order(
                order.id,
                {"status": OrderStatus.PREPARING.value},
                expected_status=OrderStatus.PLACED,
            )

        stored = await sql_store.get_order(order.id)
        assert stored.status == "Cancelled"

    @pytest.mark.asyncio
    async def test_update_unknown_order(self, sql_store):
        with pytest.raises(NotFoundError):
            await sql_store.update_order(uuid.uuid4(), {"status": "Preparing"})


class TestDrivers:
    @pytest.mark.asyncio
    async def test_duplicate_email_is_validation_error(self, sql_store):
        await _driver(sql_store, email="dup@example.com")

        with pytest.raises(ValidationError):
            await _driver(sql_store, email="dup@example.com", name="Other")

        found = await sql_store.get_driver_by_email("dup@example.com")
        assert found.name == "Ravi"

    @pytest.mark.asyncio
    async def test_lock_unknown_driver(self, sql_store):
        with pytest.raises(NotFoundError):
            await sql_store.lock_driver(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_update_driver(self, sql_store):
        driver = await _driver(sql_store)

        updated = await sql_store.update_driver(driver.id, {"is_online": True, "latitude": 9.9})

        assert updated.is_online is True
        assert updated.latitude == 9.9


class TestWithdrawals:
    @pytest.mark.asyncio
    async def test_filter_by_driver_and_status(self, sql_store):
        driver = await _driver(sql_store)
        other = await _driver(sql_store, email="meera@example.com", name="Meera")
        for driver_id, status, n in (
            (driver.id, WithdrawalStatus.PAID, 1),
            (driver.id, WithdrawalStatus.PENDING, 2),
            (other.id, WithdrawalStatus.PAID, 3),
        ):
            await sql_store.insert_withdrawal(
                Withdrawal(
                    id=uuid.uuid4(),
                    driver_id=driver_id,
                    amount=Decimal("10.00"),
                    status=status.value,
                    transaction_id=f"TXN_TEST_{n}",
                    created_at=_T0 + timedelta(minutes=n),
                )
            )
        await sql_store.commit()

        paid = await sql_store.find_withdrawals(
            WithdrawalFilter(driver_id=driver.id, status=WithdrawalStatus.PAID)
        )
        everything = await sql_store.find_withdrawals()

        assert [w.transaction_id for w in paid] == ["TXN_TEST_1"]
        assert [w.transaction_id for w in everything] == ["TXN_TEST_3", "TXN_TEST_2", "TXN_TEST_1"]


class TestServicesOnSqlStore:
    @pytest.mark.asyncio
    async def test_ledger_round_trip(self, sql_store):
        ledger = DriverLedger(commission_rate=Decimal("0.07"), locks=DriverLocks())
        driver = await _driver(sql_store)
        # The rejected withdrawal rolls back, which expires `driver`
        driver_id = driver.id
        await _order(sql_store, 1, OrderStatus.DELIVERED, driver_id, Decimal("1000"))
        await _order(sql_store, 2, OrderStatus.DELIVERED, driver_id, Decimal("500"))

        result = await ledger.request_withdrawal(sql_store, driver_id, Decimal("50"), "ravi@upi")
        assert result.new_balance == Decimal("55.00")

        with pytest.raises(InsufficientBalanceError) as exc_info:
            await ledger.request_withdrawal(sql_store, driver_id, Decimal("60"), None)
        assert exc_info.value.available == Decimal("55.00")

        history = await ledger.withdrawal_history(sql_store, driver_id)
        assert len(history) == 1

    @pytest.mark.asyncio
    async def test_lifecycle_accept_and_deliver(self, sql_store):
        lifecycle = OrderLifecycleManager()
        driver = await _driver(sql_store)
        order = await _order(sql_store, 1)

        await lifecycle.assign(sql_store, order.id, driver.id, None, Actor.DRIVER)
        await lifecycle.transition(sql_store, order.id, OrderStatus.OUT_FOR_DELIVERY, Actor.DRIVER)
        delivered = await lifecycle.transition(
            sql_store, order.id, OrderStatus.DELIVERED, Actor.DRIVER
        )

        assert delivered.status == "Delivered"
        assert delivered.driver_name == "Ravi"


class TestErrorMapping:
    @pytest.mark.asyncio
    async def test_database_errors_become_store_unavailable(self, sql_store):
        sql_store.session.execute = AsyncMock(
            side_effect=OperationalError("SELECT 1", {}, Exception("connection refused"))
        )

        with pytest.raises(StoreUnavailableError) as exc_info:
            await sql_store.find_orders()

        assert exc_info.value.context["operation"] == "find_orders"
        assert exc_info.value.context["error_type"] == "OperationalError"


class TestSeed:
    @pytest.mark.asyncio
    async def test_seeding_twice_replaces_the_catalogue(self, sql_store):
        await seed_products(sql_store.session)
        count = await seed_products(sql_store.session)

        products = await sql_store.find_products()
        assert len(products) == count == len(SEED_PRODUCTS)
