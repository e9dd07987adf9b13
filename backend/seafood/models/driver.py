"""
SeaFood Delivery Backend — Driver SQLAlchemy Model
===================================================

What:  ORM model representing the `drivers` table.
Why:   Orders reference drivers by id; withdrawals lock the driver row to
       serialize balance checks for that driver.

is_online/latitude/longitude are operational state only. The ledger never
reads them.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from seafood.database import Base


class Driver(Base):
    __tablename__ = "drivers"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    vehicle_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    is_online: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    longitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Driver(id={self.id}, name='{self.name}', online={self.is_online})>"
