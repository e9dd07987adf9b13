"""
Alembic Migration Environment
===============================

What:  Runs Alembic against the async engine configured in seafood.config.
Who:   `alembic upgrade head` from the backend/ directory.

Delivery schema notes:
    - compare_type is on: a change to a money column's NUMERIC(12, 2)
      precision or to the status column width must show up in
      --autogenerate, not slip through as "no changes".
    - SQLite (local dev only) gets batch mode, since it cannot ALTER
      constraints such as ck_withdrawals_amount_positive in place.
    - Autogenerate runs that find nothing write no empty revision file.
"""

import asyncio
import logging
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from seafood.config import settings
from seafood.database import Base

# Registers drivers, orders, withdrawals and products on Base.metadata
import seafood.models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

target_metadata = Base.metadata

# Single source of truth for the URL: the app settings, not alembic.ini
config.set_main_option("sqlalchemy.url", settings.database_url)


def _skip_empty_revisions(context, revision, directives):
    if getattr(config.cmd_opts, "autogenerate", False):
        script = directives[0]
        if script.upgrade_ops.is_empty():
            directives[:] = []
            logger.info("No schema changes detected; no revision written")


def _configure_options() -> dict:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": settings.is_sqlite,
        "process_revision_directives": _skip_empty_revisions,
    }


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(),
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    context.configure(connection=connection, **_configure_options())

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
