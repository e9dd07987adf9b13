"""
SeaFood Delivery Backend — Product SQLAlchemy Model
====================================================

Catalogue entries shown on the storefront. Plain CRUD, no lifecycle.
"""

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Float, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from seafood.database import Base


class Product(Base):
    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    delivery_time: Mapped[str] = mapped_column(String(50), nullable=False, default="30-45 min")
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=4.5)
    is_bestseller: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}', price={self.price})>"
