"""
FitTrack Backend — Database Engine & Transaction Management
=============================================================

What:  Async SQLAlchemy engine, session factory, and scoped transaction helper.
Why:   Centralizes all database connection logic in one place.
How:   Builds an async engine with connection pooling from explicit
       DatabaseSettings; stores borrow one session per operation and run
       their statements inside `transaction()`, which commits on success and
       rolls back on every other exit path.
Who:   The application factory builds the engine; stores receive the
       session factory at construction.
When:  Engine is created once per process; sessions are created per operation.

Architecture Decision:
    We use async SQLAlchemy (with asyncpg driver) because:
    1. Non-blocking I/O — a slow query doesn't block other requests
    2. Natural fit with FastAPI's async request handling
    No application-level locks are taken anywhere: concurrent writers are
    serialized only by PostgreSQL's transaction isolation.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from fittrack.config import DatabaseSettings


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, used by Alembic for migrations and by
    the test suite to create the schema.
    """
    pass


# ── Engine Configuration ──────────────────────────────────────────────────
def create_engine(db_settings: DatabaseSettings, echo: bool = False) -> AsyncEngine:
    """
    Create the pooled async engine for the configured PostgreSQL server.

    pool_recycle=3600: recycles connections every hour so a server-side idle
    timeout never hands us a dead socket.
    """
    return create_async_engine(
        db_settings.url,
        pool_size=db_settings.pool_size,
        max_overflow=db_settings.max_overflow,
        pool_pre_ping=db_settings.pool_pre_ping,
        pool_recycle=3600,
        connect_args=db_settings.connect_args,
        echo=echo,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Creates new AsyncSession instances with consistent configuration.

    expire_on_commit=False: rows loaded inside a transaction stay readable
    after commit, when the stores convert them into domain objects.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ── Scoped Transaction ────────────────────────────────────────────────────
@asynccontextmanager
async def transaction(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """
    Borrow a pooled connection and run one transaction on it.

    How it works:
        1. Opens a session (the connection is checked out on first use)
        2. Begins a transaction
        3. Body completes normally: COMMIT
        4. Body raises (including CancelledError on a deadline): ROLLBACK
        5. Always: session closed, connection returned to the pool

    Example usage in a store:
        async with transaction(self._session_factory) as session:
            session.add(row)
            await session.flush()
    """
    async with session_factory() as session:
        async with session.begin():
            yield session


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine(engine: AsyncEngine) -> None:
    """Closes all pooled connections. Called during application shutdown."""
    await engine.dispose()
