"""
Tests for settings loading.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from gastos.config import AppSettings, DatabaseSettings, get_settings, validate_all_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # Keep a developer's .env and GASTOS_DB_* variables out of these tests
    monkeypatch.chdir(tmp_path)
    for name in ("GASTOS_DB_PATH", "GASTOS_DB_JOURNAL_MODE", "GASTOS_DB_TIMEOUT",
                 "LOG_LEVEL", "DEBUG_MODE"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestDatabaseSettings:
    """Tests for SQLite storage settings."""

    def test_defaults(self):
        """Test the built-in defaults."""
        settings = DatabaseSettings()
        assert settings.path == "gastos.db"
        assert settings.journal_mode == "WAL"
        assert settings.timeout == 5.0

    def test_environment_prefix(self, monkeypatch):
        """Test GASTOS_DB_ variables override the defaults."""
        monkeypatch.setenv("GASTOS_DB_PATH", "/data/finanzas.db")
        monkeypatch.setenv("GASTOS_DB_JOURNAL_MODE", "delete")
        settings = DatabaseSettings()
        assert settings.path == "/data/finanzas.db"
        assert settings.journal_mode == "DELETE"

    def test_unknown_journal_mode(self):
        """Test journal modes SQLite does not know are rejected."""
        with pytest.raises(PydanticValidationError):
            DatabaseSettings(journal_mode="FAST")

    def test_timeout_must_be_positive(self):
        """Test a zero lock timeout is rejected."""
        with pytest.raises(PydanticValidationError):
            DatabaseSettings(timeout=0)


class TestAppSettings:
    """Tests for application settings."""

    def test_log_level_is_normalized(self):
        """Test log levels are upper-cased."""
        assert AppSettings(log_level="warning").log_level == "WARNING"

    def test_debug_mode_forces_debug_level(self):
        """Test debug_mode overrides the configured level."""
        settings = AppSettings(log_level="ERROR", debug_mode=True)
        assert settings.effective_log_level == "DEBUG"

    def test_unknown_log_level(self):
        """Test unknown log levels are rejected."""
        with pytest.raises(PydanticValidationError):
            AppSettings(log_level="LOUD")


class TestValidateAllSettings:
    """Tests for the startup settings check."""

    def test_all_valid(self):
        """Test every section loads with no environment set."""
        assert validate_all_settings() == {"database": True, "app": True}

    def test_reports_broken_section(self, monkeypatch):
        """Test a broken section is reported without hiding the others."""
        monkeypatch.setenv("GASTOS_DB_JOURNAL_MODE", "FAST")
        results = validate_all_settings()
        assert results["database"] is False
        assert "database_error" in results
        assert results["app"] is True
