"""
SeaFood Delivery Backend — Catalog Service
===========================================

What:  Product catalogue and order creation.
Why:   Thin glue, but it is the only place orders are born, so it is the
       only place total_amount is set. Nothing updates it afterwards.
"""

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

from seafood.models import Order, OrderStatus, Product
from seafood.services.money import to_money
from seafood.services.store_base import DataStore

logger = logging.getLogger(__name__)


class CatalogService:
    async def list_products(self, store: DataStore) -> List[Product]:
        return await store.find_products()

    async def add_product(self, store: DataStore, data: Dict[str, Any]) -> Product:
        product = await store.insert_product(Product(id=uuid.uuid4(), **data))
        await store.commit()
        logger.info("Product added: %s (%s)", product.name, product.id)
        return product

    async def create_order(
        self,
        store: DataStore,
        user_email: str,
        items: List[Any],
        total_amount: Decimal,
        address: Dict[str, Any],
        payment_method: Optional[str],
    ) -> Order:
        order = await store.insert_order(
            Order(
                id=uuid.uuid4(),
                user_email=user_email,
                items=items,
                total_amount=to_money(total_amount),
                address=address,
                payment_method=payment_method,
                status=OrderStatus.PLACED.value,
                driver_id=None,
                driver_name=None,
                created_at=datetime.now(timezone.utc),
            )
        )
        await store.commit()
        logger.info("Order %s placed by %s (total %s)", order.id, user_email, order.total_amount)
        return order


catalog_service = CatalogService()
