"""
SeaFood Delivery Backend — Driver Service
==========================================

What:  Driver registration, online status and the admin driver list.
Why:   The ledger and the lifecycle manager only reference drivers; this is
       where driver records are created and their operational state changes.

Credentials are not handled here. Login is outside this service.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from seafood.exceptions import ValidationError
from seafood.models import Driver
from seafood.services.store_base import DataStore

logger = logging.getLogger(__name__)


class DriverService:
    async def register(
        self,
        store: DataStore,
        name: str,
        email: str,
        phone: str,
        vehicle_number: Optional[str] = None,
    ) -> Driver:
        """
        Raises:
            ValidationError: email already registered
        """
        if await store.get_driver_by_email(email) is not None:
            logger.warning("Driver registration rejected: %s already registered", email)
            raise ValidationError(message="Email already registered", field="email")

        driver = await store.insert_driver(
            Driver(
                id=uuid.uuid4(),
                name=name,
                email=email,
                phone=phone,
                vehicle_number=vehicle_number,
                is_online=False,
                latitude=0.0,
                longitude=0.0,
                created_at=datetime.now(timezone.utc),
            )
        )
        await store.commit()
        logger.info("Driver registered: %s (%s)", driver.name, driver.id)
        return driver

    async def set_online_status(
        self,
        store: DataStore,
        driver_id: uuid.UUID,
        is_online: bool,
        location: Optional[Tuple[float, float]] = None,
    ) -> Driver:
        # A missing location resets to 0,0 rather than keeping a stale fix
        latitude, longitude = location if location is not None else (0.0, 0.0)
        driver = await store.update_driver(
            driver_id,
            {"is_online": is_online, "latitude": latitude, "longitude": longitude},
        )
        await store.commit()
        logger.info("Driver %s is now %s", driver_id, "online" if is_online else "offline")
        return driver

    async def list_drivers(self, store: DataStore) -> List[Driver]:
        return await store.find_drivers()


driver_service = DriverService()
