"""Environment-based configuration for the cache layer."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheSettings(BaseSettings):
    """Cache backend selection, timeouts and logging.

    The remote store is chosen once from these values: Upstash REST
    credentials win over ``REDIS_URL``; with neither set the in-process
    fallback store is used.
    """

    UPSTASH_REDIS_REST_URL: str | None = Field(default=None, description="Upstash REST endpoint")
    UPSTASH_REDIS_REST_TOKEN: str | None = Field(default=None, description="Upstash REST token")
    REDIS_URL: str | None = Field(default=None, description="redis:// URL for a direct connection")

    CACHE_KEY_PREFIX: str = Field(default="", description="Namespace prepended to every Redis key")
    CACHE_STORE_TIMEOUT: float = Field(default=5.0, gt=0, description="Per-call store timeout in seconds")
    CACHE_SWEEP_INTERVAL: float = Field(
        default=60.0, gt=0, description="Seconds between in-memory expiry sweeps"
    )

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="console", description="Log renderer")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    @property
    def upstash_configured(self) -> bool:
        return bool(self.UPSTASH_REDIS_REST_URL and self.UPSTASH_REDIS_REST_TOKEN)

    @property
    def redis_configured(self) -> bool:
        return bool(self.REDIS_URL)


@lru_cache
def get_settings() -> CacheSettings:
    """Load settings once per process."""
    return CacheSettings()
