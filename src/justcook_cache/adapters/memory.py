"""In-process fallback store.

Used when no remote store is configured. Same contract as the remote
stores, including JSON encoding of values, but nothing is shared across
processes: a lock taken here only excludes other tasks in the same event
loop. The expiry sweep starts on the first get or set inside a running loop.
"""

import asyncio
import json
import re
import time
from collections.abc import Callable, Iterable
from contextlib import suppress
from typing import Any

from justcook_cache.adapters.base import SCAN_COUNT
from justcook_cache.logger import get_logger
from justcook_cache.types import CacheEntry

logger = get_logger(__name__)


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a Redis-style glob (``*``, ``?``) to an anchored regex."""
    parts: list[str] = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("^" + "".join(parts) + "$", re.DOTALL)


class MemoryStore:
    """Async in-memory store with lazy expiry and a periodic sweep."""

    distributed = False

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: float = 60.0,
    ) -> None:
        self._entries: dict[str, CacheEntry[str]] = {}
        self._clock = clock
        self._sweep_interval = sweep_interval
        self._lock = asyncio.Lock()
        self._sweeper: asyncio.Task[None] | None = None

    def __len__(self) -> int:
        return len(self._entries)

    def _live(self, key: str, now: float) -> CacheEntry[str] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(now):
            del self._entries[key]
            return None
        return entry

    async def get(self, key: str) -> Any | None:
        """Get a value by key, evicting it if expired."""
        self.start()
        async with self._lock:
            entry = self._live(key, self._clock())
        # Decode a fresh copy so callers never share the stored object
        return None if entry is None else json.loads(entry.value)

    async def set(
        self,
        key: str,
        value: Any,
        *,
        ttl_seconds: int,
        only_if_absent: bool = False,
    ) -> bool:
        """Store a value; with only_if_absent, refuse while a live entry exists."""
        self.start()
        data = json.dumps(value)
        async with self._lock:
            now = self._clock()
            if only_if_absent and self._live(key, now) is not None:
                return False
            self._entries[key] = CacheEntry(value=data, expires_at=now + ttl_seconds)
            return True

    async def delete(self, key: str) -> None:
        """Delete a key."""
        async with self._lock:
            self._entries.pop(key, None)

    async def delete_many(self, keys: Iterable[str]) -> None:
        """Delete several keys."""
        async with self._lock:
            for key in keys:
                self._entries.pop(key, None)

    async def scan(
        self, cursor: int, *, match: str, count: int = SCAN_COUNT
    ) -> tuple[int, list[str]]:
        """Return every live matching key in one page (cursor always 0)."""
        _ = cursor, count
        regex = glob_to_regex(match)
        async with self._lock:
            now = self._clock()
            return 0, [
                key
                for key, entry in self._entries.items()
                if not entry.is_expired(now) and regex.match(key)
            ]

    async def delete_pattern(self, pattern: str) -> int:
        """Delete all live keys matching a glob pattern."""
        regex = glob_to_regex(pattern)
        async with self._lock:
            now = self._clock()
            doomed = [
                key
                for key, entry in self._entries.items()
                if not entry.is_expired(now) and regex.match(key)
            ]
            for key in doomed:
                del self._entries[key]
            return len(doomed)

    async def clear(self) -> None:
        """Drop every entry."""
        async with self._lock:
            self._entries.clear()

    async def sweep(self) -> int:
        """Remove expired entries, return how many were dropped."""
        async with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("memory store swept", removed=len(expired), remaining=len(self._entries))
        return len(expired)

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            await self.sweep()

    def start(self) -> None:
        """Start the periodic sweep task in the running event loop."""
        loop = asyncio.get_running_loop()
        if self._sweeper is None or self._sweeper.done() or self._sweeper.get_loop() is not loop:
            self._sweeper = asyncio.create_task(self._sweep_forever())

    @property
    def sweeping(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    async def disconnect(self) -> None:
        """Stop the sweep task."""
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await self._sweeper
        self._sweeper = None
