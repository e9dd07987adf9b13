"""
SeaFood Delivery Backend — SQLAlchemy Data Store
=================================================

What:  DataStore implementation over one AsyncSession.
Why:   Keeps every SQL statement in one module; services only speak the
       DataStore contract.
How:   Each method runs its query on the request's session and flushes
       writes. SQLAlchemyError is translated into StoreUnavailableError with
       the original error type kept in the context (logged, never returned).

Locking:
    lock_driver() issues SELECT ... FOR UPDATE on the driver row. On
    PostgreSQL this serializes withdrawals for one driver across every
    worker process until the transaction ends. SQLite ignores FOR UPDATE,
    which is why config validation warns about SQLite URLs.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, desc, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from seafood.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from seafood.models import Driver, Order, OrderStatus, Product, Withdrawal
from seafood.services.store_base import DataStore, OrderFilter, WithdrawalFilter

logger = logging.getLogger(__name__)


def _order_clause(f: OrderFilter):
    conditions = []
    if f.driver_id is not None:
        conditions.append(Order.driver_id == f.driver_id)
    if f.unassigned:
        conditions.append(Order.driver_id.is_(None))
    if f.statuses is not None:
        conditions.append(Order.status.in_([s.value for s in f.statuses]))
    if f.user_email is not None:
        conditions.append(Order.user_email == f.user_email)
    return and_(*conditions) if conditions else None


class SqlAlchemyStore(DataStore):
    """DataStore bound to a single AsyncSession (one per request)."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _unavailable(self, operation: str, exc: Exception) -> StoreUnavailableError:
        logger.error("Store operation '%s' failed: %s", operation, str(exc), exc_info=True)
        return StoreUnavailableError(
            context={"operation": operation, "error_type": type(exc).__name__},
        )

    # ── Orders ────────────────────────────────────────────────────────────

    async def get_order(self, order_id: uuid.UUID) -> Optional[Order]:
        try:
            return await self.session.get(Order, order_id)
        except SQLAlchemyError as e:
            raise self._unavailable("get_order", e)

    async def find_orders(self, *filters: OrderFilter) -> List[Order]:
        query = select(Order)
        clauses = [_order_clause(f) for f in filters]
        # A filter with no criteria matches everything, so the OR is moot
        if clauses and all(c is not None for c in clauses):
            query = query.where(or_(*clauses))
        query = query.order_by(desc(Order.created_at))
        try:
            result = await self.session.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._unavailable("find_orders", e)

    async def insert_order(self, order: Order) -> Order:
        try:
            self.session.add(order)
            await self.session.flush()
            return order
        except SQLAlchemyError as e:
            raise self._unavailable("insert_order", e)

    async def update_order(
        self,
        order_id: uuid.UUID,
        patch: Dict[str, Any],
        expected_status: Optional[OrderStatus] = None,
    ) -> Order:
        try:
            result = await self.session.execute(
                select(Order).where(Order.id == order_id).with_for_update()
            )
            order = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._unavailable("update_order", e)

        if order is None:
            raise NotFoundError(resource="order", resource_id=str(order_id))

        if expected_status is not None and order.status != expected_status.value:
            raise InvalidTransitionError(
                current=order.status,
                target=str(patch.get("status", expected_status.value)),
                reason="the order was changed by another request",
            )

        for field, value in patch.items():
            setattr(order, field, value)
        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            raise self._unavailable("update_order", e)
        return order

    # ── Drivers ───────────────────────────────────────────────────────────

    async def get_driver(self, driver_id: uuid.UUID) -> Optional[Driver]:
        try:
            return await self.session.get(Driver, driver_id)
        except SQLAlchemyError as e:
            raise self._unavailable("get_driver", e)

    async def get_driver_by_email(self, email: str) -> Optional[Driver]:
        try:
            result = await self.session.execute(select(Driver).where(Driver.email == email))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._unavailable("get_driver_by_email", e)

    async def find_drivers(self) -> List[Driver]:
        try:
            result = await self.session.execute(select(Driver).order_by(desc(Driver.created_at)))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._unavailable("find_drivers", e)

    async def insert_driver(self, driver: Driver) -> Driver:
        try:
            self.session.add(driver)
            await self.session.flush()
            return driver
        except IntegrityError:
            await self.session.rollback()
            raise ValidationError(message="Email already registered", field="email")
        except SQLAlchemyError as e:
            raise self._unavailable("insert_driver", e)

    async def update_driver(self, driver_id: uuid.UUID, patch: Dict[str, Any]) -> Driver:
        driver = await self.get_driver(driver_id)
        if driver is None:
            raise NotFoundError(resource="driver", resource_id=str(driver_id))
        for field, value in patch.items():
            setattr(driver, field, value)
        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            raise self._unavailable("update_driver", e)
        return driver

    async def lock_driver(self, driver_id: uuid.UUID) -> Driver:
        try:
            result = await self.session.execute(
                select(Driver).where(Driver.id == driver_id).with_for_update()
            )
            driver = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._unavailable("lock_driver", e)
        if driver is None:
            raise NotFoundError(resource="driver", resource_id=str(driver_id))
        return driver

    # ── Withdrawals ───────────────────────────────────────────────────────

    async def find_withdrawals(self, filter: Optional[WithdrawalFilter] = None) -> List[Withdrawal]:
        query = select(Withdrawal)
        if filter is not None:
            if filter.driver_id is not None:
                query = query.where(Withdrawal.driver_id == filter.driver_id)
            if filter.status is not None:
                query = query.where(Withdrawal.status == filter.status.value)
        query = query.order_by(desc(Withdrawal.created_at))
        try:
            result = await self.session.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._unavailable("find_withdrawals", e)

    async def insert_withdrawal(self, withdrawal: Withdrawal) -> Withdrawal:
        try:
            self.session.add(withdrawal)
            await self.session.flush()
            return withdrawal
        except SQLAlchemyError as e:
            raise self._unavailable("insert_withdrawal", e)

    # ── Products ──────────────────────────────────────────────────────────

    async def find_products(self) -> List[Product]:
        try:
            result = await self.session.execute(select(Product).order_by(Product.name))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._unavailable("find_products", e)

    async def insert_product(self, product: Product) -> Product:
        try:
            self.session.add(product)
            await self.session.flush()
            return product
        except SQLAlchemyError as e:
            raise self._unavailable("insert_product", e)

    # ── Transaction control ───────────────────────────────────────────────

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise self._unavailable("commit", e)

    async def rollback(self) -> None:
        await self.session.rollback()
