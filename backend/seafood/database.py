"""
SeaFood Delivery Backend — Database Session Management
========================================================

What:  Async SQLAlchemy engine, session factory, FastAPI dependencies and the
       connectivity probe.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine with connection pooling and hands out one
       session per request. Services see the session only through a
       DataStore (see services/sql_store.py).
When:  Engine is created at module import; sessions are created per-request;
       the engine is disposed in the app lifespan.

Transaction ownership:
    Mutating services call `store.commit()` themselves so that the commit
    happens while their locks are still held. The dependency below still
    commits on success, which is a no-op for read-only requests, and rolls
    back on any error.
"""

import logging
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from tenacity import (
    before_sleep_log,
    retry,
    stop_after_attempt,
    wait_exponential,
)

from seafood.config import settings

logger = logging.getLogger(__name__)


def _engine_options() -> dict:
    # SQLite (used by local experiments) runs on a single connection pool
    # that rejects QueuePool sizing arguments.
    options = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: services return ORM rows after committing, and
# those rows are serialized after the session has moved on.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object, which Alembic reads for migrations.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    1. Creates a new session from the factory
    2. Yields it to the request (via get_store)
    3. On success: commits anything still pending
    4. On error: rolls back
    5. Always: closes the session (returns connection to pool)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Connectivity Probe ────────────────────────────────────────────────────
@retry(
    stop=stop_after_attempt(settings.store_probe_attempts),
    wait=wait_exponential(
        multiplier=1,
        min=settings.store_probe_min_wait,
        max=settings.store_probe_max_wait,
    ),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
async def ping_database() -> None:
    """
    What:  Executes SELECT 1 against the pool.
    When:  At startup (lifespan) and from GET /health.
    Why retry: The database container is often still starting when the API
           boots. Only this probe retries; request handlers never do.
    """
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Gracefully closes all pooled connections at shutdown."""
    await engine.dispose()
