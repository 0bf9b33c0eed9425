"""
FitTrack Backend — Configuration Tests
========================================

What:  Tests for DatabaseSettings / Settings loading and validation.

What we test:
    ✅ Explicit connection options → asyncpg URL and connect args
    ✅ DB_* environment variables picked up
    ✅ Invalid sslmode / log level rejected at load time
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from fittrack.config import DatabaseSettings, Settings


class TestDatabaseSettings:
    """Tests for DatabaseSettings."""

    def test_url_built_from_fields(self):
        db = DatabaseSettings(
            host="db.internal",
            port=6543,
            user="fit",
            password="pw",
            dbname="fitness",
            sslmode="require",
        )

        assert db.url.drivername == "postgresql+asyncpg"
        assert db.url.host == "db.internal"
        assert db.url.port == 6543
        assert db.url.username == "fit"
        assert db.url.password == "pw"
        assert db.url.database == "fitness"
        assert db.connect_args == {"ssl": "require"}

    def test_password_with_special_characters_kept_intact(self):
        """URL.create escapes the password; it is never string-concatenated."""
        db = DatabaseSettings(password="p@ss:w/rd")

        assert db.url.password == "p@ss:w/rd"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DB_HOST", "pg.example.com")
        monkeypatch.setenv("DB_PORT", "15432")
        monkeypatch.setenv("DB_NAME", "fit_prod")
        monkeypatch.setenv("DB_SSLMODE", "verify-full")

        db = DatabaseSettings()

        assert db.host == "pg.example.com"
        assert db.port == 15432
        assert db.dbname == "fit_prod"
        assert db.sslmode == "verify-full"

    def test_sslmode_normalized(self):
        assert DatabaseSettings(sslmode="REQUIRE").sslmode == "require"

    def test_invalid_sslmode_rejected(self):
        with pytest.raises(PydanticValidationError):
            DatabaseSettings(sslmode="sometimes")

    def test_invalid_port_rejected(self):
        with pytest.raises(PydanticValidationError):
            DatabaseSettings(port=0)


class TestSettings:
    """Tests for application Settings."""

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(PydanticValidationError):
            Settings(log_level="LOUD")

    def test_timeout_must_be_positive(self):
        with pytest.raises(PydanticValidationError):
            Settings(db_operation_timeout=0)

    def test_nested_database_settings(self, monkeypatch):
        monkeypatch.setenv("DB_USER", "svc_fittrack")

        assert Settings().database.user == "svc_fittrack"
