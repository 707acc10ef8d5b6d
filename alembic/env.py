"""
Alembic Migration Environment
===============================

What:  Runs the FoodHub schema migrations against `settings.database_url`.
How:   Online mode opens one unpooled async connection and hands it to
       Alembic through `run_sync()`; offline mode renders SQL for the same
       URL. Both share `_migration_options()`.
Who:   Called by `alembic` CLI commands (upgrade, downgrade, revision).

Autogenerate compares column types and server defaults (the order tables
rely on both for status and timestamps) and skips writing a revision file
when nothing changed.
"""

import asyncio
import logging
from logging.config import fileConfig
from typing import Any, Dict

from alembic import context
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from foodhub.config import settings
from foodhub.database import Base

# Registers every model on Base.metadata for --autogenerate
import foodhub.models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

DATABASE_URL = settings.database_url


def _skip_empty_revisions(migration_context, revision, directives) -> None:
    if getattr(config.cmd_opts, "autogenerate", False):
        script = directives[0]
        if script.upgrade_ops.is_empty():
            directives[:] = []
            logger.info("No schema changes detected; no revision written.")


def _migration_options() -> Dict[str, Any]:
    # SQLite cannot ALTER most constraints in place; batch mode rebuilds the table
    return {
        "target_metadata": Base.metadata,
        "compare_type": True,
        "compare_server_default": True,
        "render_as_batch": make_url(DATABASE_URL).get_backend_name() == "sqlite",
        "process_revision_directives": _skip_empty_revisions,
    }


def run_migrations_offline() -> None:
    """Write the migration SQL to stdout instead of executing it."""
    context.configure(
        url=DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_migration_options(),
    )
    with context.begin_transaction():
        context.run_migrations()


def _apply(connection: Connection) -> None:
    context.configure(connection=connection, **_migration_options())
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Apply pending migrations over a single unpooled async connection."""
    logger.info(
        "Migrating %s", make_url(DATABASE_URL).render_as_string(hide_password=True)
    )
    engine = create_async_engine(DATABASE_URL, poolclass=NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_apply)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
