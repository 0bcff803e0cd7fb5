"""Redis store adapter (redis.asyncio)."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from justcook_cache.adapters.base import SCAN_COUNT, scan_delete
from justcook_cache.errors import StoreError


def _decode(data: bytes | str) -> str:
    return data.decode("utf-8") if isinstance(data, bytes) else data


class RedisStore:
    """Async Redis store.

    ``set`` maps to ``SET key value EX ttl [NX]``, which is atomic and is
    the only mutual-exclusion primitive the cache relies on.
    """

    distributed = True

    def __init__(self, client: Redis, *, prefix: str = "") -> None:
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str, *, prefix: str = "", timeout: float = 5.0) -> RedisStore:
        """Connect from a ``redis://`` URL with bounded socket timeouts."""
        client = Redis.from_url(url, socket_timeout=timeout, socket_connect_timeout=timeout)
        return cls(client, prefix=prefix)

    def _key(self, key: str) -> str:
        """Generate the full Redis key."""
        return f"{self._prefix}:{key}" if self._prefix else key

    def _strip(self, full_key: bytes | str) -> str:
        key = _decode(full_key)
        if self._prefix:
            return key.removeprefix(f"{self._prefix}:")
        return key

    async def get(self, key: str) -> Any | None:
        """Get a value by key."""
        try:
            data = await self._client.get(self._key(key))
        except RedisError as exc:
            raise StoreError("get", key, str(exc)) from exc
        if data is None:
            return None
        return json.loads(_decode(data))

    async def set(
        self,
        key: str,
        value: Any,
        *,
        ttl_seconds: int,
        only_if_absent: bool = False,
    ) -> bool:
        """Store a value with expiration."""
        try:
            result = await self._client.set(
                self._key(key),
                json.dumps(value),
                ex=ttl_seconds,
                nx=only_if_absent,
            )
        except RedisError as exc:
            raise StoreError("set", key, str(exc)) from exc
        # NX on an existing key replies nil
        return bool(result)

    async def delete(self, key: str) -> None:
        """Delete a key."""
        try:
            await self._client.delete(self._key(key))
        except RedisError as exc:
            raise StoreError("delete", key, str(exc)) from exc

    async def delete_many(self, keys: Iterable[str]) -> None:
        """Delete several keys with a single DEL."""
        full_keys = [self._key(key) for key in keys]
        if not full_keys:
            return
        try:
            await self._client.delete(*full_keys)
        except RedisError as exc:
            raise StoreError("delete_many", None, str(exc)) from exc

    async def scan(
        self, cursor: int, *, match: str, count: int = SCAN_COUNT
    ) -> tuple[int, list[str]]:
        """SCAN one page of keys matching a glob pattern."""
        try:
            result = await self._client.scan(cursor, match=self._key(match), count=count)
        except RedisError as exc:
            raise StoreError("scan", match, str(exc)) from exc
        next_cursor = int(result[0])
        return next_cursor, [self._strip(key) for key in result[1]]

    async def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching a glob pattern via SCAN."""
        return await scan_delete(self, pattern)

    def start(self) -> None:
        """No background work for a remote store."""

    async def disconnect(self) -> None:
        """Close the Redis connection."""
        await self._client.aclose()
