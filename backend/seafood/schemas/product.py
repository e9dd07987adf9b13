"""
SeaFood Delivery Backend — Product Schemas
===========================================
"""

import uuid
from typing import List, Optional

from pydantic import Field

from seafood.schemas.common import CamelModel, Envelope, Money


class ProductCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(default="")
    price: Money = Field(ge=0, max_digits=12, decimal_places=2)
    category: Optional[str] = Field(default=None, max_length=100)
    image_url: Optional[str] = Field(default=None, max_length=1024)
    delivery_time: str = Field(default="30-45 min", max_length=50)
    rating: float = Field(default=4.5, ge=0, le=5)
    is_bestseller: bool = Field(default=False)


class ProductOut(ProductCreate):
    id: uuid.UUID


class ProductEnvelope(Envelope):
    product: ProductOut


class ProductListEnvelope(Envelope):
    products: List[ProductOut]
