"""
SeaFood Delivery Backend — FastAPI Dependencies
================================================

get_store() hands every request a DataStore bound to that request's session.
Tests override it with `app.dependency_overrides[get_store]`.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from seafood.database import get_db_session
from seafood.services.sql_store import SqlAlchemyStore
from seafood.services.store_base import DataStore


async def get_store(session: AsyncSession = Depends(get_db_session)) -> DataStore:
    return SqlAlchemyStore(session)
