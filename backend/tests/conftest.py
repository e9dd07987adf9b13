"""
SeaFood Delivery Backend — Test Configuration (conftest.py)
============================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── memory_store: InMemoryStore (no database needed)
    ├── ledger: DriverLedger with the default 0.07 commission and fresh locks
    ├── lifecycle: OrderLifecycleManager
    ├── driver / delivered_driver: a registered driver (with 1000 + 500 delivered)
    ├── sql_store: SqlAlchemyStore over an in-memory aiosqlite database
    └── test_client: HTTPX AsyncClient against the app, store overridden
"""

import os

# Settings are read at import time, so the environment goes first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["COMMISSION_RATE"] = "0.07"
os.environ["LOG_LEVEL"] = "WARNING"

from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from seafood.database import Base
from seafood.models import OrderStatus
from seafood.services.driver_ledger import DriverLedger, DriverLocks
from seafood.services.order_lifecycle import OrderLifecycleManager
from seafood.services.sql_store import SqlAlchemyStore

from tests.fakes import InMemoryStore, add_driver, add_order


@pytest.fixture
def memory_store():
    """A fresh dict-backed DataStore for each test."""
    return InMemoryStore()


@pytest.fixture
def ledger():
    return DriverLedger(commission_rate=Decimal("0.07"), locks=DriverLocks())


@pytest.fixture
def lifecycle():
    return OrderLifecycleManager()


@pytest.fixture
def driver(memory_store):
    return add_driver(memory_store, name="Ravi")


@pytest.fixture
def delivered_driver(memory_store, driver):
    """Driver with two delivered orders: 1000 + 500 → earnings 105.00 at 7%."""
    add_order(memory_store, Decimal("1000"), OrderStatus.DELIVERED, driver_id=driver.id)
    add_order(memory_store, Decimal("500"), OrderStatus.DELIVERED, driver_id=driver.id)
    return driver


@pytest_asyncio.fixture
async def sql_store():
    """
    SqlAlchemyStore on a private in-memory SQLite database.

    SQLite ignores FOR UPDATE, so these tests cover queries and mapping,
    not cross-process locking.
    """
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield SqlAlchemyStore(session)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(memory_store):
    """
    HTTPX client routed straight into the ASGI app.

    Every request shares `memory_store`, like requests sharing one database.
    """
    from seafood.dependencies import get_store
    from seafood.main import app

    app.dependency_overrides[get_store] = lambda: memory_store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
