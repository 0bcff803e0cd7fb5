"""Tests for settings and store selection."""

import pytest

from justcook_cache import CacheSettings, MemoryStore, create_cache, create_store

_ENV_VARS = ("UPSTASH_REDIS_REST_URL", "UPSTASH_REDIS_REST_TOKEN", "REDIS_URL")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove backend variables from the environment."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _settings(**values) -> CacheSettings:
    return CacheSettings(_env_file=None, **values)


class TestCacheSettings:
    """Tests for CacheSettings."""

    def test_defaults(self) -> None:
        settings = _settings()
        assert settings.upstash_configured is False
        assert settings.redis_configured is False
        assert settings.CACHE_SWEEP_INTERVAL == 60.0
        assert settings.CACHE_STORE_TIMEOUT == 5.0

    def test_upstash_needs_url_and_token(self) -> None:
        assert not _settings(UPSTASH_REDIS_REST_URL="https://x.upstash.io").upstash_configured
        assert _settings(
            UPSTASH_REDIS_REST_URL="https://x.upstash.io", UPSTASH_REDIS_REST_TOKEN="t"
        ).upstash_configured

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REDIS_URL", "redis://cache:6379/0")
        monkeypatch.setenv("CACHE_SWEEP_INTERVAL", "15")
        settings = _settings()
        assert settings.redis_configured
        assert settings.CACHE_SWEEP_INTERVAL == 15.0

    def test_rejects_non_positive_timeout(self) -> None:
        with pytest.raises(ValueError):
            _settings(CACHE_STORE_TIMEOUT=0)


class TestStoreSelection:
    """Tests for picking the backing store once."""

    def test_memory_fallback(self) -> None:
        store = create_store(_settings(CACHE_SWEEP_INTERVAL=5))
        assert isinstance(store, MemoryStore)
        assert create_cache(_settings()).is_available() is False

    async def test_redis_when_url_set(self) -> None:
        pytest.importorskip("redis")
        from justcook_cache.adapters.redis import RedisStore

        store = create_store(_settings(REDIS_URL="redis://localhost:6379/0"))
        assert isinstance(store, RedisStore)
        await store.disconnect()

    async def test_upstash_preferred_over_redis(self) -> None:
        pytest.importorskip("httpx")
        from justcook_cache.adapters.upstash import UpstashStore

        cache = create_cache(
            _settings(
                UPSTASH_REDIS_REST_URL="https://x.upstash.io",
                UPSTASH_REDIS_REST_TOKEN="t",
                REDIS_URL="redis://localhost:6379/0",
            )
        )
        assert isinstance(cache.store, UpstashStore)
        assert cache.is_available() is True
        await cache.close()
