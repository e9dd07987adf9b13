"""
SeaFood Delivery Backend — Withdrawal SQLAlchemy Model
=======================================================

What:  Append-only ledger of driver payouts (`withdrawals` table).
Why:   A driver's balance is derived: earnings from delivered orders minus
       the sum of Paid rows here. Rows are inserted by the driver ledger and
       never updated or deleted.

Payouts settle immediately, so rows are written as Paid. Pending exists in
the enum for data imported from the old system.
"""

import enum
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Index, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from seafood.database import Base


class WithdrawalStatus(str, enum.Enum):
    PENDING = "Pending"
    PAID = "Paid"


class Withdrawal(Base):
    __tablename__ = "withdrawals"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    driver_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    upi_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=WithdrawalStatus.PAID.value,
    )
    transaction_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_withdrawals_amount_positive"),
        Index("idx_withdrawals_driver_status", "driver_id", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<Withdrawal(id={self.id}, driver_id={self.driver_id}, "
            f"amount={self.amount}, status='{self.status}')>"
        )
