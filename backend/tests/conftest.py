"""
FitTrack Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (real transactional database,
       stores, API client).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.
When:  Fixtures are created per-test.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── engine: SQLite file database (aiosqlite) with the full schema
    │   ├── session_factory
    │   │   ├── workout_store
    │   │   └── user_store
    │   └── test_client: HTTPX AsyncClient against create_app(engine=engine)
    ├── sample_workout: Workout with one repetition and one timed entry
    └── count_rows: helper that counts rows in a table

The stores are exercised against a real database, not a mocked session:
rollback, CHECK constraints, unique keys and ON DELETE CASCADE are exactly
what the tests need to observe.
"""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import create_async_engine


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any app imports
# Why: Prevents tests from picking up a developer's real database settings
os.environ["DB_HOST"] = "localhost"
os.environ["DB_NAME"] = "fittrack_test"
os.environ["DB_PASSWORD"] = "test-password-not-real"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from fittrack.config import Settings  # noqa: E402
from fittrack.database import Base, create_session_factory  # noqa: E402
from fittrack.domain.workout import (  # noqa: E402
    DurationMode,
    RepetitionMode,
    Workout,
    WorkoutEntry,
)
import fittrack.models  # noqa: E402,F401  registers every table on Base.metadata
from fittrack.services.user_store import UserStore  # noqa: E402
from fittrack.services.workout_store import WorkoutStore  # noqa: E402

# bcrypt's minimum cost keeps hashing fast in tests
TEST_HASH_ROUNDS = 4


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def engine(tmp_path):
    """
    Provides an async engine on a fresh SQLite file with the schema created.

    SQLite leaves foreign keys off per connection; the connect hook turns
    them on so ON DELETE CASCADE behaves as it does on PostgreSQL.
    """
    db_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'fittrack_test.db'}")

    @event.listens_for(db_engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield db_engine

    await db_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def workout_store(session_factory):
    return WorkoutStore(session_factory, default_timeout=5.0)


@pytest.fixture
def user_store(session_factory):
    return UserStore(session_factory, default_timeout=5.0)


@pytest.fixture
def count_rows(session_factory):
    """
    Returns an async helper: `await count_rows(WorkoutRow)` → row count.

    Reads through a separate session, so it only sees committed data.
    """

    async def _count(model) -> int:
        async with session_factory() as session:
            result = await session.execute(select(func.count()).select_from(model))
            return result.scalar_one()

    return _count


# ══════════════════════════════════════════════════════════════════════════
# Domain Data Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def sample_workout():
    """
    A valid workout: a weighted bench press and a timed plank.

    Entries are deliberately submitted out of order_index order.
    """
    return Workout(
        title="Push day",
        description="Chest and core",
        duration_minutes=45,
        calories_burned=320,
        entries=[
            WorkoutEntry(
                exercise_name="Plank",
                sets=3,
                measurement=DurationMode(seconds=60),
                order_index=1,
            ),
            WorkoutEntry(
                exercise_name="Bench press",
                sets=4,
                measurement=RepetitionMode(reps=8, weight=80.0),
                order_index=0,
                notes="Pause on chest",
            ),
        ],
    )


# ══════════════════════════════════════════════════════════════════════════
# API Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(engine) -> AsyncGenerator[AsyncClient, None]:
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient configured to talk to our FastAPI app.
    How:     create_app() receives explicit Settings and the SQLite engine;
             ASGITransport routes requests directly to the app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from fittrack.main import create_app

    settings = Settings(log_level="WARNING", password_hash_rounds=TEST_HASH_ROUNDS)
    app = create_app(settings, engine=engine)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
