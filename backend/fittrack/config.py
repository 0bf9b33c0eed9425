"""
FitTrack Backend — Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
       Fails fast if values are out of range — prevents runtime surprises.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and returns a `Settings` object.
Who:   Built once by the process entry point and passed into create_app().
When:  Loaded once at process start; never re-read from module globals.

Design Decision:
    Connection parameters are individual fields (host, port, user, password,
    dbname, sslmode) rather than one opaque URL, so each can be overridden
    independently per deployment (DB_HOST=..., DB_SSLMODE=require, ...).
    The async SQLAlchemy URL is assembled from them on demand.
"""

from typing import Any, Dict

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


VALID_SSL_MODES = {"disable", "allow", "prefer", "require", "verify-ca", "verify-full"}


class DatabaseSettings(BaseSettings):
    """
    PostgreSQL connection options.

    Environment variables use the DB_ prefix: DB_HOST, DB_PORT, DB_USER,
    DB_PASSWORD, DB_NAME, DB_SSLMODE.
    """

    host: str = Field(default="localhost")
    port: int = Field(default=5432, ge=1, le=65535)
    user: str = Field(default="postgres")
    password: str = Field(default="postgres")
    dbname: str = Field(default="fittrack", validation_alias="DB_NAME")
    sslmode: str = Field(default="disable")

    # What: Connection pool sizing
    # Valid range: 1-100 (PostgreSQL default max_connections is 100)
    pool_size: int = Field(default=10, ge=1, le=100)
    max_overflow: int = Field(default=5, ge=0, le=50)
    pool_pre_ping: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("sslmode")
    @classmethod
    def validate_sslmode(cls, v: str) -> str:
        """Ensures sslmode is one PostgreSQL recognizes."""
        lower = v.lower()
        if lower not in VALID_SSL_MODES:
            raise ValueError(f"Invalid sslmode '{v}'. Must be one of: {sorted(VALID_SSL_MODES)}")
        return lower

    @property
    def url(self) -> URL:
        """Async SQLAlchemy URL (postgresql+asyncpg) built from the individual fields."""
        return URL.create(
            drivername="postgresql+asyncpg",
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.dbname,
        )

    @property
    def connect_args(self) -> Dict[str, Any]:
        """
        Driver-level arguments passed through to asyncpg.connect().

        asyncpg takes the libpq sslmode names directly through its `ssl`
        argument, so the configured value is forwarded unchanged.
        """
        return {"ssl": self.sslmode}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local development.
    Production deployments MUST override DB_PASSWORD and DB_HOST.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # What: Connection options, read from the DB_* environment variables
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8080, ge=1024, le=65535)

    # What: Upper bound (seconds) for one store operation, including every
    # round trip inside its transaction. Callers may pass a tighter deadline.
    db_operation_timeout: float = Field(default=10.0, gt=0, le=300)

    # What: bcrypt cost factor used when hashing new passwords
    password_hash_rounds: int = Field(default=12, ge=4, le=16)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper


def load_settings() -> Settings:
    """
    Build the process-wide configuration.

    Called exactly once by the entry point (uvicorn factory, Alembic env);
    the returned object is threaded through constructors from there on.
    """
    return Settings()
