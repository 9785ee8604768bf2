"""Unit tests for settings loading."""

import pytest
from pydantic import ValidationError

from elevate.services.config import Settings, get_settings

ENV_VARS = ["DATABASE_URL", "DATABASE_ECHO", "LOG_LEVEL", "LOG_FILE", "BILLING_WORKERS", "PERSISTENCE_TIMEOUT_SECONDS"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    def test_defaults(self):
        """Test defaults."""
        settings = Settings()

        assert settings.database_url == "sqlite:///./elevate.db"
        assert settings.log_level == "INFO"
        assert settings.log_file == "logs/billing.log"
        assert settings.billing_workers == 1
        assert settings.persistence_timeout_seconds == 30.0

    def test_environment_overrides(self, monkeypatch):
        """Test environment overrides."""
        monkeypatch.setenv("DATABASE_URL", "postgresql://elevate@db/elevate")
        monkeypatch.setenv("BILLING_WORKERS", "4")

        settings = Settings()

        assert settings.database_url == "postgresql://elevate@db/elevate"
        assert settings.billing_workers == 4

    def test_env_file_is_read(self, tmp_path):
        """Test env file is read."""
        (tmp_path / ".env").write_text("LOG_LEVEL=DEBUG\nUNRELATED_SETTING=1\n")

        assert Settings().log_level == "DEBUG"

    def test_invalid_worker_count_rejected(self, monkeypatch):
        """Test invalid worker count rejected."""
        monkeypatch.setenv("BILLING_WORKERS", "0")

        with pytest.raises(ValidationError):
            Settings()

    def test_get_settings_is_cached(self):
        """Test get settings is cached."""
        assert get_settings() is get_settings()
