"""
Monetary helpers shared by the driver ledger and the response schemas.

All arithmetic stays in full-precision Decimal. Rounding to cents happens
only when a value is shown to a client or written to a NUMERIC(12, 2) column.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

CENT = Decimal("0.01")

# Half a cent. Balance comparisons and zero-clamping use this.
TOLERANCE = Decimal("0.005")

ZERO = Decimal("0.00")


def to_decimal(value: Union[Decimal, int, float, str]) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so 0.1 becomes Decimal("0.1"), not the binary expansion
    return Decimal(str(value))


def to_money(value: Union[Decimal, int, float, str]) -> Decimal:
    """
    Round to cents for presentation.

    Values within TOLERANCE of zero come back as 0.00, never -0.00 or -0.01.
    """
    amount = to_decimal(value)
    if abs(amount) < TOLERANCE:
        return ZERO
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def exceeds(amount: Decimal, available: Decimal) -> bool:
    """True when `amount` is more than `available` by at least half a cent."""
    return amount - available >= TOLERANCE
