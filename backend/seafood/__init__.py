"""
SeaFood Delivery Backend — Application Package Initializer
===========================================================

What: Marks the `seafood` directory as a Python package.
Why:  Enables module imports like `from seafood.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, envelope shaping
    ├─────────────────────────────────────┤
    │   Services (Lifecycle / Ledger)     │  ← state machine, balance rules
    ├─────────────────────────────────────┤
    │      DataStore (repository)         │  ← abstract collaborator
    ├─────────────────────────────────────┤
    │  SQLAlchemy models + async session  │  ← persistence
    └─────────────────────────────────────┘

    Services only ever talk to a DataStore. The SQLAlchemy implementation is
    injected per request, and tests swap in an in-memory store.
"""

__version__ = "1.0.0"
