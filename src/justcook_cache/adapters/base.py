"""Base store protocol and shared helpers for key-value backends."""

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

SCAN_COUNT = 100
DELETE_BATCH_SIZE = 100


@runtime_checkable
class AsyncStore(Protocol):
    """Async key-value store interface.

    Values are JSON-serializable payloads. Implementations raise
    ``StoreError`` on transport failures; callers decide whether to
    fail open.
    """

    distributed: bool

    async def get(self, key: str) -> Any | None:
        """Get a value by key, None when absent or expired."""
        ...

    async def set(
        self,
        key: str,
        value: Any,
        *,
        ttl_seconds: int,
        only_if_absent: bool = False,
    ) -> bool:
        """Store a value with expiry. False when only_if_absent and key is live."""
        ...

    async def delete(self, key: str) -> None:
        """Delete a key."""
        ...

    async def delete_many(self, keys: Iterable[str]) -> None:
        """Delete several keys in one request."""
        ...

    async def scan(
        self, cursor: int, *, match: str, count: int = SCAN_COUNT
    ) -> tuple[int, list[str]]:
        """Cursor-based iteration over keys matching a glob pattern."""
        ...

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern, return how many."""
        ...

    def start(self) -> None:
        """Start background work; called from inside a running event loop."""
        ...

    async def disconnect(self) -> None:
        """Release connections and stop background work."""
        ...


async def scan_delete(
    store: AsyncStore,
    pattern: str,
    *,
    count: int = SCAN_COUNT,
    batch_size: int = DELETE_BATCH_SIZE,
) -> int:
    """Delete keys matching ``pattern`` using SCAN, never KEYS.

    Keys are collected over a full cursor cycle first, then deleted in
    batches of ``batch_size`` to keep each request small.
    """
    keys: list[str] = []
    cursor = 0
    while True:
        cursor, batch = await store.scan(cursor, match=pattern, count=count)
        keys.extend(batch)
        if cursor == 0:
            break

    # SCAN may return a key more than once
    unique = list(dict.fromkeys(keys))
    for start in range(0, len(unique), batch_size):
        await store.delete_many(unique[start : start + batch_size])
    return len(unique)
