"""Cache core - get/set/delete, pattern invalidation and stampede-protected refresh.

The cache is a performance optimisation, never a source of truth, so every
store failure is logged at debug level and treated as a miss (fail open):
consumers never see a cache-specific exception, only a recomputation.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Awaitable, Callable, Sequence
from functools import wraps
from typing import Any, ParamSpec, TypeVar, cast

from justcook_cache.adapters.base import AsyncStore
from justcook_cache.adapters.memory import MemoryStore
from justcook_cache.config import CacheSettings, get_settings
from justcook_cache.logger import get_logger
from justcook_cache.ttl import ttl_for
from justcook_cache.types import Factory, TTLTier

P = ParamSpec("P")
T = TypeVar("T")

logger = get_logger(__name__)

LOCK_PREFIX = "lock:"
MIN_LOCK_TTL = 30
RETRY_DELAYS: tuple[float, ...] = (0.1, 0.2, 0.3)


class Cache:
    """Async cache over a single store chosen at construction time."""

    def __init__(
        self,
        store: AsyncStore,
        *,
        retry_delays: Sequence[float] = RETRY_DELAYS,
        min_lock_ttl: int = MIN_LOCK_TTL,
    ) -> None:
        self._store = store
        self._retry_delays = tuple(retry_delays)
        self._min_lock_ttl = min_lock_ttl

    @property
    def store(self) -> AsyncStore:
        return self._store

    def is_available(self) -> bool:
        """True when backed by a shared remote store rather than the fallback."""
        return self._store.distributed

    async def get(self, key: str) -> Any | None:
        """Get a cached value, None on miss or store failure."""
        try:
            return await self._store.get(key)
        except Exception as exc:
            logger.debug("cache get failed", key=key, error=str(exc))
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Overwrite a value with a fresh expiry."""
        try:
            await self._store.set(key, value, ttl_seconds=ttl_seconds)
        except Exception as exc:
            logger.debug("cache set failed", key=key, error=str(exc))

    async def delete(self, key: str) -> None:
        """Remove one key."""
        try:
            await self._store.delete(key)
        except Exception as exc:
            logger.debug("cache delete failed", key=key, error=str(exc))

    async def delete_pattern(self, pattern: str) -> None:
        """Remove every key matching a glob pattern, e.g. ``"trending:*"``."""
        try:
            removed = await self._store.delete_pattern(pattern)
        except Exception as exc:
            logger.debug("cache delete pattern failed", pattern=pattern, error=str(exc))
            return
        logger.debug("cache pattern invalidated", pattern=pattern, removed=removed)

    async def get_or_set(self, key: str, tier: TTLTier, factory: Factory[T]) -> T:
        """Return the cached value or populate it, with stampede protection.

        Args:
            key: Cache key (build it with ``cache_keys``)
            tier: TTL tier name
            factory: Async function computing the value on a miss

        Returns:
            Cached or freshly computed value

        Only the caller holding ``lock:<key>`` runs the factory and writes
        the result. Others poll the cache on a fixed backoff schedule and,
        if it is still empty, run the factory themselves without caching.
        Factory exceptions propagate after the lock is released.
        """
        ttl = ttl_for(tier)

        cached = await self.get(key)
        if cached is not None:
            return cast(T, cached)

        lock_key = f"{LOCK_PREFIX}{key}"
        if await self._acquire_lock(lock_key, max(ttl, self._min_lock_ttl)):
            try:
                # Another populator may have finished before we got the lock
                cached = await self.get(key)
                if cached is not None:
                    return cast(T, cached)
                value = await factory()
                await self.set(key, value, ttl)
                return value
            finally:
                await self._release_lock(lock_key)

        for delay in self._retry_delays:
            await asyncio.sleep(delay)
            cached = await self.get(key)
            if cached is not None:
                return cast(T, cached)

        logger.warning("cache stampede fallback triggered", key=key)
        return await factory()

    def cached(
        self,
        tier: TTLTier,
        key: Callable[P, str],
    ) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
        """Decorator routing an async function through ``get_or_set``.

        Usage:
            @cache.cached("trending", key=cache_keys.trending)
            async def trending_recipes(language: str | None = None) -> list[dict]:
                ...
        """

        def decorator(fn: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
            @wraps(fn)
            async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
                return await self.get_or_set(
                    key(*args, **kwargs), tier, lambda: fn(*args, **kwargs)
                )

            return wrapper

        return decorator

    async def start(self) -> None:
        """Start store background work (the in-memory expiry sweep)."""
        self._store.start()

    async def close(self) -> None:
        """Disconnect from the store."""
        await self._store.disconnect()

    async def __aenter__(self) -> Cache:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Lock helpers
    # -------------------------------------------------------------------------

    async def _acquire_lock(self, lock_key: str, ttl_seconds: int) -> bool:
        """Atomic set-if-absent with expiry; a store failure counts as contention."""
        try:
            return await self._store.set(
                lock_key, uuid.uuid4().hex, ttl_seconds=ttl_seconds, only_if_absent=True
            )
        except Exception as exc:
            logger.debug("cache lock acquire failed", lock_key=lock_key, error=str(exc))
            return False

    async def _release_lock(self, lock_key: str) -> None:
        try:
            await self._store.delete(lock_key)
        except Exception as exc:
            logger.debug("cache lock release failed", lock_key=lock_key, error=str(exc))


def create_store(settings: CacheSettings) -> AsyncStore:
    """Pick the backing store once from settings."""
    if settings.upstash_configured:
        from justcook_cache.adapters.upstash import UpstashStore

        logger.info("cache using upstash redis")
        return UpstashStore(
            cast(str, settings.UPSTASH_REDIS_REST_URL),
            cast(str, settings.UPSTASH_REDIS_REST_TOKEN),
            prefix=settings.CACHE_KEY_PREFIX,
            timeout=settings.CACHE_STORE_TIMEOUT,
        )
    if settings.redis_configured:
        from justcook_cache.adapters.redis import RedisStore

        logger.info("cache using redis")
        return RedisStore.from_url(
            cast(str, settings.REDIS_URL),
            prefix=settings.CACHE_KEY_PREFIX,
            timeout=settings.CACHE_STORE_TIMEOUT,
        )
    logger.info("redis not configured, using in-memory fallback")
    return MemoryStore(sweep_interval=settings.CACHE_SWEEP_INTERVAL)


def create_cache(settings: CacheSettings | None = None) -> Cache:
    """Create the process-wide cache.

    Args:
        settings: Configuration (default: loaded from the environment)

    Returns:
        Cache bound to the Upstash, Redis or in-memory store
    """
    return Cache(create_store(settings or get_settings()))


__all__ = ["LOCK_PREFIX", "MIN_LOCK_TTL", "RETRY_DELAYS", "Cache", "create_cache", "create_store"]
