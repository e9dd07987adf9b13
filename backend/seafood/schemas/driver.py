"""
SeaFood Delivery Backend — Driver and Ledger Schemas
=====================================================

Driver registration/status, earnings stats, balance and withdrawals.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import EmailStr, Field

from seafood.schemas.common import CamelModel, Envelope, Money


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class RegisterDriverRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(min_length=3, max_length=50)
    vehicle_number: Optional[str] = Field(default=None, max_length=50)


class Location(CamelModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class DriverStatusRequest(CamelModel):
    driver_id: uuid.UUID
    is_online: bool
    location: Optional[Location] = None


class WithdrawRequest(CamelModel):
    """
    Body of POST /driver/withdraw.

    amount is bounded to what a NUMERIC(12, 2) column holds but its sign is
    not checked here: zero and negative values are rejected by the ledger
    with invalid_amount, inside the same envelope as insufficient_balance.
    """

    driver_id: uuid.UUID
    amount: Decimal = Field(max_digits=12, decimal_places=2)
    upi_id: Optional[str] = Field(default=None, max_length=255)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class DriverOut(CamelModel):
    id: uuid.UUID
    name: str
    email: str
    phone: str
    vehicle_number: Optional[str] = None
    is_online: bool
    latitude: float
    longitude: float


class DriverEnvelope(Envelope):
    driver: DriverOut


class DriverListEnvelope(Envelope):
    drivers: List[DriverOut]


class StatsEnvelope(Envelope):
    completed_orders: int
    total_revenue: Money
    earnings: Money


class BalanceEnvelope(Envelope):
    driver_id: uuid.UUID
    balance: Money


class WithdrawalOut(CamelModel):
    id: uuid.UUID
    driver_id: uuid.UUID
    amount: Money
    upi_id: Optional[str] = None
    status: str
    transaction_id: str
    created_at: datetime


class WithdrawEnvelope(Envelope):
    new_balance: Money
    withdrawal: WithdrawalOut


class WithdrawalListEnvelope(Envelope):
    withdrawals: List[WithdrawalOut]
