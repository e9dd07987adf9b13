"""
SeaFood Delivery Backend — Order SQLAlchemy Model
==================================================

What:  ORM model representing the `orders` table.
Who:   Read and updated through the DataStore by the order lifecycle manager,
       the driver ledger (delivered orders feed earnings) and the catalog glue.

Table Design Rationale:
    - total_amount is NUMERIC(12, 2): money never goes through float.
    - items/address are JSON: they are snapshots of what the customer saw at
      checkout and are never queried into.
    - status holds an OrderStatus value; only the lifecycle manager writes it.
    - (driver_id, status) index serves both the driver's order board and the
      delivered-orders scan behind driver earnings.
"""

import enum
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Index, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from seafood.database import Base


class OrderStatus(str, enum.Enum):
    """Order lifecycle states. Values are the strings clients send and see."""

    PLACED = "Placed"
    PREPARING = "Preparing"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


class Order(Base):
    """
    A customer order.

    Lifecycle:
        Placed → Preparing → Out for Delivery → Delivered
        any non-terminal state → Cancelled
    """

    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    items: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)

    # Immutable after creation
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    address: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    status: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default=OrderStatus.PLACED.value,
    )

    driver_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True, default=None)
    driver_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_orders_driver_status", "driver_id", "status"),
        Index("idx_orders_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Order(id={self.id}, status='{self.status}', "
            f"driver_id={self.driver_id}, total={self.total_amount})>"
        )
