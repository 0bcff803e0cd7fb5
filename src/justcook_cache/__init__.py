"""justcook-cache - stampede-protected caching for expensive feed queries."""

from contextlib import suppress

# Stores
from justcook_cache.adapters import AsyncStore, MemoryStore

# Core
from justcook_cache.cache import Cache, create_cache, create_store
from justcook_cache.config import CacheSettings, get_settings
from justcook_cache.errors import CacheError, StoreError, UnknownTTLTierError
from justcook_cache.keys import CacheKeys, cache_keys
from justcook_cache.logger import get_logger, setup_logging
from justcook_cache.ttl import CACHE_TTL, ttl_for
from justcook_cache.types import CacheEntry, TTLTier

# Optional store imports - only available when dependencies are installed
with suppress(ImportError):
    from justcook_cache.adapters import RedisStore

with suppress(ImportError):
    from justcook_cache.adapters import UpstashStore

__version__ = "0.1.0"

__all__ = [
    "CACHE_TTL",
    "AsyncStore",
    "Cache",
    "CacheEntry",
    "CacheError",
    "CacheKeys",
    "CacheSettings",
    "MemoryStore",
    "RedisStore",
    "StoreError",
    "TTLTier",
    "UnknownTTLTierError",
    "UpstashStore",
    "cache_keys",
    "create_cache",
    "create_store",
    "get_logger",
    "get_settings",
    "setup_logging",
    "ttl_for",
]
