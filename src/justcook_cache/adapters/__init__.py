"""Key-value store adapters for justcook-cache."""

from contextlib import suppress

from justcook_cache.adapters.base import AsyncStore, scan_delete
from justcook_cache.adapters.memory import MemoryStore

# Optional adapters - only available when dependencies are installed
with suppress(ImportError):
    from justcook_cache.adapters.redis import RedisStore

with suppress(ImportError):
    from justcook_cache.adapters.upstash import UpstashStore

__all__ = [
    "AsyncStore",
    "MemoryStore",
    "RedisStore",
    "UpstashStore",
    "scan_delete",
]
