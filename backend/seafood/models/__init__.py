"""
SeaFood Delivery Backend — ORM Models
======================================

One module per table. Importing this package registers every model with
Base.metadata (Alembic and the test fixtures rely on that).
"""

from seafood.models.driver import Driver
from seafood.models.order import Order, OrderStatus
from seafood.models.product import Product
from seafood.models.withdrawal import Withdrawal, WithdrawalStatus

__all__ = [
    "Driver",
    "Order",
    "OrderStatus",
    "Product",
    "Withdrawal",
    "WithdrawalStatus",
]
