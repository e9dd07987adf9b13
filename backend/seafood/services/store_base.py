"""
SeaFood Delivery Backend — Abstract Data Store Interface
=========================================================

What:  Abstract base class for the persistence collaborator used by every service.
Why:   The lifecycle manager and the driver ledger hold no state of their own.
       Everything they read or write goes through this contract, so the
       SQLAlchemy implementation can be swapped for an in-memory one in tests.
How:   Concrete implementations inherit from DataStore and implement every
       abstract method. One instance is scoped to one request/transaction.

Contract notes:
    - find_* methods return lists sorted by created_at, newest first.
    - find_orders() takes one or more OrderFilter values and returns orders
      matching ANY of them (OR semantics).
    - update_order() with `expected_status` is a compare-and-swap: it fails
      with InvalidTransitionError if the stored status differs.
    - lock_driver() is the per-driver serialization point. It must block
      other lock_driver() calls for the same driver until commit()/rollback().
    - Implementation errors are wrapped in StoreUnavailableError. Nothing
      here retries.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from seafood.models import Driver, Order, OrderStatus, Product, Withdrawal, WithdrawalStatus


@dataclass(frozen=True)
class OrderFilter:
    """
    Conjunction of optional criteria; None means "don't care".

    unassigned=True restricts to orders with no driver.
    """

    driver_id: Optional[uuid.UUID] = None
    statuses: Optional[Sequence[OrderStatus]] = None
    user_email: Optional[str] = None
    unassigned: bool = False

    def matches(self, order: Order) -> bool:
        """In-process evaluation, for stores that filter in Python."""
        if self.driver_id is not None and order.driver_id != self.driver_id:
            return False
        if self.unassigned and order.driver_id is not None:
            return False
        if self.statuses is not None and order.status not in {s.value for s in self.statuses}:
            return False
        if self.user_email is not None and order.user_email != self.user_email:
            return False
        return True


@dataclass(frozen=True)
class WithdrawalFilter:
    driver_id: Optional[uuid.UUID] = None
    status: Optional[WithdrawalStatus] = None

    def matches(self, withdrawal: Withdrawal) -> bool:
        if self.driver_id is not None and withdrawal.driver_id != self.driver_id:
            return False
        if self.status is not None and withdrawal.status != self.status.value:
            return False
        return True


class DataStore(ABC):
    """
    Repository interface over orders, drivers, withdrawals and products.

    Implementations:
        - SqlAlchemyStore: async SQLAlchemy session (production)
        - tests/fakes.py InMemoryStore: dict-backed, for service tests
    """

    # ── Orders ────────────────────────────────────────────────────────────

    @abstractmethod
    async def get_order(self, order_id: uuid.UUID) -> Optional[Order]:
        """Return the order or None."""
        ...

    @abstractmethod
    async def find_orders(self, *filters: OrderFilter) -> List[Order]:
        """
        Return orders matching any of `filters`, newest first.

        With no filters, returns every order.
        """
        ...

    @abstractmethod
    async def insert_order(self, order: Order) -> Order:
        ...

    @abstractmethod
    async def update_order(
        self,
        order_id: uuid.UUID,
        patch: Dict[str, Any],
        expected_status: Optional[OrderStatus] = None,
    ) -> Order:
        """
        Apply `patch` to one order as a single atomic update.

        Raises:
            NotFoundError: order_id does not resolve
            InvalidTransitionError: expected_status given and not current
        """
        ...

    # ── Drivers ───────────────────────────────────────────────────────────

    @abstractmethod
    async def get_driver(self, driver_id: uuid.UUID) -> Optional[Driver]:
        ...

    @abstractmethod
    async def get_driver_by_email(self, email: str) -> Optional[Driver]:
        ...

    @abstractmethod
    async def find_drivers(self) -> List[Driver]:
        ...

    @abstractmethod
    async def insert_driver(self, driver: Driver) -> Driver:
        ...

    @abstractmethod
    async def update_driver(self, driver_id: uuid.UUID, patch: Dict[str, Any]) -> Driver:
        ...

    @abstractmethod
    async def lock_driver(self, driver_id: uuid.UUID) -> Driver:
        """
        Acquire the driver's serialization point for the current transaction.

        Raises:
            NotFoundError: driver_id does not resolve
        """
        ...

    # ── Withdrawals (append-only) ─────────────────────────────────────────

    @abstractmethod
    async def find_withdrawals(self, filter: Optional[WithdrawalFilter] = None) -> List[Withdrawal]:
        ...

    @abstractmethod
    async def insert_withdrawal(self, withdrawal: Withdrawal) -> Withdrawal:
        ...

    # ── Products ──────────────────────────────────────────────────────────

    @abstractmethod
    async def find_products(self) -> List[Product]:
        ...

    @abstractmethod
    async def insert_product(self, product: Product) -> Product:
        ...

    # ── Transaction control ───────────────────────────────────────────────

    @abstractmethod
    async def commit(self) -> None:
        """Persist everything written so far and release row locks."""
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...
