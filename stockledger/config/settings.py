"""
StockLedger settings.

Every value comes from the environment (or `.env`); each group of settings
reads its own prefix, e.g. `STORAGE_BACKEND`, `CACHE_TTL_SECONDS`.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Persistence configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    backend: Literal["sqlite", "memory"] = "sqlite"
    data_dir: Path = Path("data")
    db_name: str = "stockledger.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class CacheSettings(BaseSettings):
    """Report cache configuration."""

    model_config = SettingsConfigDict(env_prefix="CACHE_")

    enabled: bool = True
    redis_url: str | None = None  # e.g. redis://localhost:6379/0
    report_key: str = "product-cache"
    ttl_seconds: int = Field(default=300, gt=0)
    # Upper bound for the expiring_soon/expired fields, which age with the clock
    expiry_ttl_seconds: int = Field(default=60, gt=0)

    @field_validator("redis_url")
    @classmethod
    def blank_url_disables_redis(cls, v: str | None) -> str | None:
        return v.strip() or None if v is not None else None


class InventorySettings(BaseSettings):
    """Stock engine configuration."""

    model_config = SettingsConfigDict(env_prefix="INVENTORY_")

    expiring_window_days: int = Field(default=7, ge=0)
    lock_scope: Literal["product", "global"] = "product"


class Settings(BaseSettings):
    """Top-level settings; sub-groups are built from their own env prefixes."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "StockLedger"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    inventory: InventorySettings = Field(default_factory=InventorySettings)

    @model_validator(mode="after")
    def create_sqlite_dir(self) -> "Settings":
        if self.storage.backend == "sqlite":
            self.storage.data_dir.mkdir(parents=True, exist_ok=True)
        return self


_settings: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Forget the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
