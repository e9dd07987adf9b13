"""
SeaFood Delivery Backend — Driver Ledger
=========================================

What:  Driver earnings, balance and withdrawals.
Why:   A driver's balance is never stored. It is derived from two sources:

           earnings = sum(total_amount of Delivered orders) × commission_rate
           balance  = earnings − sum(amount of Paid withdrawals)

       so the only way to corrupt it is to record a withdrawal the balance
       does not cover. request_withdrawal() is the one writer and it checks
       under a per-driver lock.
How:   Stateless service over a DataStore. Money is Decimal end to end;
       rounding happens in money.to_money() at presentation.

Withdrawal race:
    Two requests for the same driver could both read balance 105 and both
    pay out 100. The check-and-insert therefore runs under
        1. an in-process asyncio.Lock per driver (same worker), and
        2. store.lock_driver(), a row lock held until commit (all workers).
    The commit happens inside both, so the next request always sees the
    previous withdrawal.

Withdrawals settle immediately (status Paid); there is no approval queue.
"""

import asyncio
import logging
import time
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import AsyncIterator, Dict, List, Optional

from seafood.config import settings
from seafood.exceptions import InsufficientBalanceError, InvalidAmountError
from seafood.models import OrderStatus, Withdrawal, WithdrawalStatus
from seafood.services.money import exceeds, to_decimal, to_money
from seafood.services.store_base import DataStore, OrderFilter, WithdrawalFilter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DriverStats:
    """Full-precision figures; round with to_money() before display."""

    completed_orders: int
    total_revenue: Decimal
    earnings: Decimal


@dataclass(frozen=True)
class WithdrawalResult:
    withdrawal: Withdrawal
    new_balance: Decimal


class DriverLocks:
    """
    Per-driver asyncio locks, created on demand and dropped when idle.

    Only safe within one event loop, which is how uvicorn runs a worker.
    """

    def __init__(self) -> None:
        self._locks: Dict[uuid.UUID, asyncio.Lock] = {}
        self._users: Dict[uuid.UUID, int] = {}

    @asynccontextmanager
    async def hold(self, driver_id: uuid.UUID) -> AsyncIterator[None]:
        lock = self._locks.setdefault(driver_id, asyncio.Lock())
        self._users[driver_id] = self._users.get(driver_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[driver_id] -= 1
            if self._users[driver_id] == 0:
                del self._users[driver_id]
                del self._locks[driver_id]

    def __len__(self) -> int:
        return len(self._locks)


def new_transaction_id() -> str:
    """TXN_<epoch ms>_<6 hex>; the suffix keeps same-millisecond payouts unique."""
    return f"TXN_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6].upper()}"


class DriverLedger:
    def __init__(
        self,
        commission_rate: Optional[Decimal] = None,
        locks: Optional[DriverLocks] = None,
    ):
        self.commission_rate = to_decimal(
            commission_rate if commission_rate is not None else settings.commission_rate
        )
        self.locks = locks if locks is not None else DriverLocks()

    async def compute_stats(self, store: DataStore, driver_id: uuid.UUID) -> DriverStats:
        """
        Completed deliveries, revenue and commission for one driver.

        Pure and idempotent: two calls with no order changes in between
        return equal results.
        """
        delivered = await store.find_orders(
            OrderFilter(driver_id=driver_id, statuses=(OrderStatus.DELIVERED,))
        )
        total_revenue = sum((to_decimal(o.total_amount) for o in delivered), Decimal("0"))
        return DriverStats(
            completed_orders=len(delivered),
            total_revenue=total_revenue,
            earnings=total_revenue * self.commission_rate,
        )

    async def total_paid(self, store: DataStore, driver_id: uuid.UUID) -> Decimal:
        paid = await store.find_withdrawals(
            WithdrawalFilter(driver_id=driver_id, status=WithdrawalStatus.PAID)
        )
        return sum((to_decimal(w.amount) for w in paid), Decimal("0"))

    async def current_balance(self, store: DataStore, driver_id: uuid.UUID) -> Decimal:
        """
        Earnings minus paid withdrawals, full precision.

        Both reads go through the same store, i.e. the same transaction.
        Callers that act on the result must hold the driver's lock.
        """
        stats = await self.compute_stats(store, driver_id)
        return stats.earnings - await self.total_paid(store, driver_id)

    async def request_withdrawal(
        self,
        store: DataStore,
        driver_id: uuid.UUID,
        amount: Decimal,
        upi_id: Optional[str],
    ) -> WithdrawalResult:
        """
        Pay out `amount` to the driver if the balance covers it.

        Steps (under the driver's locks):
            1. lock the driver row (NotFoundError if absent)
            2. compute the current balance
            3. InsufficientBalanceError if amount exceeds it
            4. InvalidAmountError if amount is not positive once rounded to cents
            5. insert a Paid withdrawal for the rounded amount and commit

        Returns:
            WithdrawalResult with the stored row and balance − amount
        """
        requested = to_decimal(amount)

        async with self.locks.hold(driver_id):
            try:
                await store.lock_driver(driver_id)
                balance = await self.current_balance(store, driver_id)

                if exceeds(requested, balance):
                    logger.warning(
                        "Withdrawal of %s rejected for driver %s: balance %s",
                        requested, driver_id, to_money(balance),
                    )
                    raise InsufficientBalanceError(
                        available=to_money(balance),
                        requested=requested,
                        context={"driver_id": str(driver_id)},
                    )
                # Sign first: to_money() cannot quantize an unbounded negative
                if requested <= 0 or to_money(requested) <= 0:
                    logger.warning(
                        "Withdrawal of %s rejected for driver %s: not positive",
                        amount, driver_id,
                    )
                    raise InvalidAmountError(amount=to_decimal(amount))

                # Bounded by the balance from here on, so rounding is safe
                payout = to_money(requested)
                withdrawal = await store.insert_withdrawal(
                    Withdrawal(
                        id=uuid.uuid4(),
                        driver_id=driver_id,
                        amount=payout,
                        upi_id=upi_id,
                        status=WithdrawalStatus.PAID.value,
                        transaction_id=new_transaction_id(),
                        created_at=datetime.now(timezone.utc),
                    )
                )
                await store.commit()
            except Exception:
                # Release the row lock before the asyncio lock goes. On the
                # SQL store this expires every instance loaded through the
                # same session; callers must reload before touching them.
                await store.rollback()
                raise

        new_balance = balance - payout
        logger.info(
            "Driver %s withdrew %s (%s), balance now %s",
            driver_id, payout, withdrawal.transaction_id, to_money(new_balance),
        )
        return WithdrawalResult(withdrawal=withdrawal, new_balance=new_balance)

    async def withdrawal_history(self, store: DataStore, driver_id: uuid.UUID) -> List[Withdrawal]:
        return await store.find_withdrawals(WithdrawalFilter(driver_id=driver_id))

    async def all_withdrawals(self, store: DataStore) -> List[Withdrawal]:
        return await store.find_withdrawals()


driver_ledger = DriverLedger()
