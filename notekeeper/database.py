"""
Notekeeper Backend: Storage Gateway
====================================

What:  Async SQLAlchemy engine, session factory, FastAPI session dependency,
       startup connectivity check, and driver error classification.
How:   One async engine (and therefore one connection pool) is created at
       module import and shared by every request. Each request receives its own
       AsyncSession from the factory; the session borrows a pooled connection
       and returns it when the request ends.
Who:   Route handlers receive sessions via FastAPI's dependency injection;
       the lifespan handler calls `verify_connection` and `dispose_engine`.

Connection Pooling Strategy:
    pool_size=db_max_connections, max_overflow=0:
        A fixed maximum number of concurrent database sessions. When every
        connection is checked out, acquiring one suspends the request until
        another request releases its connection.
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour
"""

import logging
from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notekeeper.config import settings

logger = logging.getLogger(__name__)


# ── Engine Configuration ──────────────────────────────────────────────────
engine: AsyncEngine = create_async_engine(
    settings.database_url,
    pool_size=settings.db_max_connections,
    max_overflow=0,
    pool_pre_ping=settings.db_pool_pre_ping,
    pool_recycle=3600,
    # Echo SQL statements only when debugging
    echo=settings.log_level == "DEBUG",
)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: returned ORM objects stay readable after commit,
# which the write operations rely on when building their responses.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Holds the shared metadata for the `notes` table. The schema itself is
    provisioned outside this service; tests build it with
    `Base.metadata.create_all`.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits anything still pending
        4. On error: rolls back
        5. Always: closes the session (returns the connection to the pool)

    Write operations commit their own statement so that commit failures are
    reported by the operation itself; the commit here is then a no-op.
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


# ── Error Classification ──────────────────────────────────────────────────
# PostgreSQL SQLSTATE for unique_violation
PG_UNIQUE_VIOLATION = "23505"
# SQLite extended result codes for UNIQUE and PRIMARY KEY constraint failures
SQLITE_CONSTRAINT_UNIQUE = 2067
SQLITE_CONSTRAINT_PRIMARYKEY = 1555


def _driver_errors(exc: BaseException) -> list[Any]:
    """Collects the DBAPI error and whatever it was raised from."""
    orig = getattr(exc, "orig", None)
    candidates = [orig, getattr(orig, "__cause__", None)]
    return [c for c in candidates if c is not None]


def is_unique_violation(exc: BaseException) -> bool:
    """
    Tells whether a storage error is a uniqueness constraint violation.

    What:  Inspects the structured error code exposed by the driver instead of
           the error's text.
    How:   asyncpg errors (as adapted by SQLAlchemy) carry `sqlstate`/`pgcode`;
           sqlite3 errors carry `sqlite_errorcode`/`sqlite_errorname`.

    Args:
        exc: Any exception raised while executing a statement.

    Returns:
        True only for IntegrityErrors whose driver code denotes a unique or
        primary-key conflict.
    """
    if not isinstance(exc, IntegrityError):
        return False

    for err in _driver_errors(exc):
        code = getattr(err, "sqlstate", None) or getattr(err, "pgcode", None)
        if code == PG_UNIQUE_VIOLATION:
            return True
        if getattr(err, "sqlite_errorcode", None) in (
            SQLITE_CONSTRAINT_UNIQUE,
            SQLITE_CONSTRAINT_PRIMARYKEY,
        ):
            return True
        if getattr(err, "sqlite_errorname", None) in (
            "SQLITE_CONSTRAINT_UNIQUE",
            "SQLITE_CONSTRAINT_PRIMARYKEY",
        ):
            return True
    return False


def driver_message(exc: BaseException) -> str:
    """Raw text of the underlying driver error, falling back to the wrapper's."""
    errors = _driver_errors(exc)
    return str(errors[0]) if errors else str(exc)


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def verify_connection() -> None:
    """
    What:  Opens one pooled connection and runs SELECT 1.
    When:  Called once during application startup (lifespan handler).
    Raises: Whatever the driver raises when the database is unreachable; the
            caller treats this as fatal.
    """
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("Connected to database")


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
