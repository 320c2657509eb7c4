# ABOUTME: Centralized configuration using Pydantic Settings.
# ABOUTME: Loads environment mode, owner identity, database URL and bind address.

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


def make_sync_url(url: str) -> str:
    """Strip the async driver from a SQLAlchemy URL (for Alembic)."""
    for driver in ("+asyncpg", "+aiosqlite", "+aiomysql"):
        url = url.replace(driver, "")
    return url


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"

    # Identity
    owner_open_id: str = "owner-dev-openid"
    identity_headers: list[str] = ["x-openid", "x-open-id"]
    session_cookie_name: str = "app_session_id"

    # Database (empty URL selects the in-memory store)
    database_url: str = ""
    db_pool_size: int = 5
    db_pool_max_overflow: int = 10
    store_fallback_to_memory: bool = False

    # Web
    host: str = "0.0.0.0"
    port: int = 8787
    cors_origins: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"

    @property
    def use_memory_store(self) -> bool:
        """Test runs and missing database URLs both force the in-memory store."""
        return self.environment == "test" or not self.database_url

    @property
    def database_url_sync(self) -> str:
        """Synchronous variant of ``database_url`` for Alembic."""
        return make_sync_url(self.database_url)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded from environment variables and .env file.
    """
    return Settings()
