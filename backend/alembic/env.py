"""
Alembic Migration Environment
===============================

What:  Configures Alembic to work with our async SQLAlchemy setup.
Why:   Alembic needs to know how to connect to the database and which
       models to track for auto-generating migrations.
How:   Builds an async engine from the same DatabaseSettings the API uses
       (DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, DB_NAME, DB_SSLMODE).
Who:   Called by `alembic` CLI commands (upgrade, downgrade, revision).
When:  During migration operations (development and deployment).
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine
from alembic import context

from fittrack.config import load_settings
from fittrack.database import Base

# Import all models so Alembic can detect them for --autogenerate
from fittrack.models import UserRow, WorkoutEntryRow, WorkoutRow  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# The URL comes from our settings, not from alembic.ini.
# Not written back into config: configparser would choke on a '%' in the password.
db_settings = load_settings().database


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    Emits the SQL to stdout without connecting, for review before applying.
    """
    context.configure(
        url=db_settings.url.render_as_string(hide_password=False),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    """Execute migrations against the provided connection, in a transaction."""
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """
    Run migrations in 'online' mode with async engine.

    How:   Creates an async engine, runs migrations in a sync context via
           connection.run_sync().
    """
    connectable = create_async_engine(
        db_settings.url,
        poolclass=pool.NullPool,  # Don't use pooling for migrations
        connect_args=db_settings.connect_args,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """Entry point for online migrations — bridges async engine with Alembic."""
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
