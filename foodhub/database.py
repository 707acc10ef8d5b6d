"""
FoodHub Backend - Database Session Management
==============================================

What:  Async SQLAlchemy engine, session factory, transaction scope and
       FastAPI session dependency.
How:   Creates an async engine with connection pooling, provides a session
       dependency that commits on success and rolls back on error.
Who:   Route handlers receive sessions via Depends(get_db_session); services
       receive them as an explicit argument.
When:  Engine is created at module import; sessions are created per-request.

Transaction model:
    One AsyncSession per request. Services flush their writes; the request
    dependency commits once the handler returns. Multi-step writes that must
    be all-or-nothing run inside `transactional()`, a SAVEPOINT that is
    rolled back alone on any exception before re-raising.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, AsyncIterator, Dict

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from foodhub.config import settings


def _engine_options(url: str) -> Dict[str, Any]:
    # SQLite (tests, local tooling) rejects the queue-pool sizing arguments
    if url.startswith("sqlite"):
        return {"echo": settings.log_level == "DEBUG"}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": settings.db_pool_pre_ping,
        "pool_recycle": 3600,
        "echo": settings.log_level == "DEBUG",
    }


def enable_sqlite_savepoints(async_engine: AsyncEngine) -> AsyncEngine:
    """
    Let SQLite honour SAVEPOINT / ROLLBACK TO.

    The sqlite3 driver defers BEGIN until the first DML statement, so a
    SAVEPOINT opened before it starts (and RELEASE then commits) the outer
    transaction. Driver-level transaction handling is switched off and BEGIN
    is emitted explicitly instead. Foreign keys are enforced as on PostgreSQL.
    """
    sync_engine = async_engine.sync_engine

    @event.listens_for(sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return async_engine


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options(settings.database_url))
if settings.database_url.startswith("sqlite"):
    enable_sqlite_savepoints(engine)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: response building reads attributes after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers every model with a single metadata object, which Alembic
    reads for migrations and the test suite uses for `create_all`.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction
        5. Always: closes the session (returns connection to pool)

    Raises:
        Any exception from the handler is re-raised after rollback so the
        global exception handlers can render it.
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


@asynccontextmanager
async def transactional(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Scope a group of writes so they persist together or not at all.

    What:  Runs the block inside a SAVEPOINT and flushes pending writes before
           releasing it. On any exception only the savepoint is rolled back;
           earlier uncommitted work in the same session is kept.
    Who:   Every service write: order creation, status changes, reviews,
           meal and user updates.

    Usage:
        async with transactional(db):
            db.add(order)
    """
    async with session.begin_nested():
        yield session
        await session.flush()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
