# ABOUTME: Tests for configuration loading and store selection flags.
# ABOUTME: Verifies Pydantic Settings defaults, env overrides and derived URLs.

import pytest

from joydao_site.config import Settings, make_sync_url


class TestSettings:
    """Tests for Settings configuration class."""

    def test_settings_default_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Settings should have correct default values."""
        for name in ("ENVIRONMENT", "DATABASE_URL", "HOST", "PORT", "OWNER_OPEN_ID"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.environment == "development"
        assert settings.host == "0.0.0.0"
        assert settings.port == 8787
        assert settings.database_url == ""
        assert settings.identity_headers == ["x-openid", "x-open-id"]
        assert settings.store_fallback_to_memory is False

    def test_settings_read_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Environment variables override defaults."""
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("HOST", "127.0.0.1")
        monkeypatch.setenv("OWNER_OPEN_ID", "site-owner")

        settings = Settings(_env_file=None)

        assert settings.port == 9000
        assert settings.host == "127.0.0.1"
        assert settings.owner_open_id == "site-owner"

    def test_invalid_environment_rejected(self) -> None:
        """Unknown environment names fail validation."""
        with pytest.raises(ValueError):
            Settings(_env_file=None, environment="staging")


class TestStoreSelection:
    """Tests for the use_memory_store flag."""

    def test_empty_url_uses_memory(self) -> None:
        settings = Settings(_env_file=None, environment="production", database_url="")
        assert settings.use_memory_store is True

    def test_test_environment_forces_memory(self) -> None:
        """A database URL is ignored in the test environment."""
        settings = Settings(
            _env_file=None,
            environment="test",
            database_url="postgresql+asyncpg://u:p@db/site",
        )
        assert settings.use_memory_store is True

    def test_url_selects_sql(self) -> None:
        settings = Settings(
            _env_file=None,
            environment="production",
            database_url="postgresql+asyncpg://u:p@db/site",
        )
        assert settings.use_memory_store is False


class TestMakeSyncUrl:
    """Tests for make_sync_url."""

    def test_strips_asyncpg(self) -> None:
        assert make_sync_url("postgresql+asyncpg://u:p@db/site") == "postgresql://u:p@db/site"

    def test_strips_aiosqlite(self) -> None:
        assert make_sync_url("sqlite+aiosqlite:///./site.db") == "sqlite:///./site.db"

    def test_plain_url_unchanged(self) -> None:
        assert make_sync_url("postgresql://u:p@db/site") == "postgresql://u:p@db/site"

    def test_settings_property(self) -> None:
        settings = Settings(_env_file=None, database_url="postgresql+asyncpg://u:p@db/site")
        assert settings.database_url_sync == "postgresql://u:p@db/site"
