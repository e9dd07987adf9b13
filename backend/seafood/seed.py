"""
SeaFood Delivery Backend — Catalogue Seeder
============================================

What:  Replaces the product catalogue with the launch catalogue.
How:   python -m seafood.seed   (uses DATABASE_URL like the server)

Destructive: every existing product row is deleted first.
"""

import asyncio
import logging
import sys
import uuid
from decimal import Decimal

from sqlalchemy import delete

from seafood.database import async_session_factory, dispose_engine
from seafood.models import Product

logger = logging.getLogger("seafood.seed")

SEED_PRODUCTS = [
    {
        "name": "Atlantic Salmon",
        "description": "Fresh premium cut.",
        "price": Decimal("500"),
        "category": "Fish",
        "image_url": "https://images.unsplash.com/photo-1599084993091-1a820b293b5c?w=500",
        "delivery_time": "35 min",
        "is_bestseller": True,
    },
    {
        "name": "Jumbo Prawns",
        "description": "Perfect for grilling.",
        "price": Decimal("399"),
        "category": "Shellfish",
        "image_url": "https://images.unsplash.com/photo-1565680018434-b513d5e5fd47?w=500",
        "delivery_time": "30 min",
        "is_bestseller": True,
    },
    {
        "name": "Jumbo Prawns (1pc)",
        "description": "Perfect for grilling.",
        "price": Decimal("10"),
        "category": "Prawns",
        "image_url": "https://cdn-icons-png.flaticon.com/512/1691/1691147.png",
        "delivery_time": "30 min",
        "is_bestseller": True,
    },
    {
        "name": "Live Mud Crab",
        "description": "Meaty and sweet.",
        "price": Decimal("750"),
        "category": "Crab",
        "image_url": "https://images.unsplash.com/photo-1551248429-40975aa4de74?w=500",
        "delivery_time": "45 min",
        "is_bestseller": False,
    },
]


async def seed_products(session) -> int:
    await session.execute(delete(Product))
    session.add_all(Product(id=uuid.uuid4(), **data) for data in SEED_PRODUCTS)
    await session.commit()
    return len(SEED_PRODUCTS)


async def main() -> None:
    async with async_session_factory() as session:
        count = await seed_products(session)
    logger.info("Seeded %d products", count)
    await dispose_engine()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, stream=sys.stdout, format="%(message)s")
    asyncio.run(main())
