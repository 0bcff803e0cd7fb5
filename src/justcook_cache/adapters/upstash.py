"""Upstash Redis store adapter (REST API over httpx)."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

import httpx

from justcook_cache.adapters.base import SCAN_COUNT, scan_delete
from justcook_cache.errors import StoreError


class UpstashStore:
    """Async store speaking to Upstash Redis through its REST endpoint.

    Each command is POSTed as a JSON array, e.g. ``["SET", "k", "v", "EX", 60]``,
    and answered with ``{"result": ...}`` or ``{"error": ...}``.
    """

    distributed = True

    def __init__(
        self,
        url: str,
        token: str,
        *,
        prefix: str = "",
        timeout: float = 5.0,
    ) -> None:
        self._prefix = prefix
        self._client = httpx.AsyncClient(
            base_url=url,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
        )

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}" if self._prefix else key

    async def _command(self, operation: str, key: str | None, *args: Any) -> Any:
        """Run one Redis command and return its ``result``."""
        try:
            response = await self._client.post("/", json=list(args))
        except httpx.HTTPError as exc:
            raise StoreError(operation, key, str(exc) or type(exc).__name__) from exc
        try:
            body = response.json()
        except ValueError:
            raise StoreError(operation, key, f"HTTP {response.status_code}") from None
        if not isinstance(body, dict):
            raise StoreError(operation, key, f"unexpected reply: {body!r}")
        if not response.is_success or "error" in body:
            raise StoreError(operation, key, body.get("error", f"HTTP {response.status_code}"))
        return body.get("result")

    async def get(self, key: str) -> Any | None:
        """Get a value by key."""
        data = await self._command("get", key, "GET", self._key(key))
        if data is None:
            return None
        return json.loads(data)

    async def set(
        self,
        key: str,
        value: Any,
        *,
        ttl_seconds: int,
        only_if_absent: bool = False,
    ) -> bool:
        """Store a value with expiration."""
        args: list[Any] = ["SET", self._key(key), json.dumps(value), "EX", ttl_seconds]
        if only_if_absent:
            args.append("NX")
        result = await self._command("set", key, *args)
        return result == "OK"

    async def delete(self, key: str) -> None:
        """Delete a key."""
        await self._command("delete", key, "DEL", self._key(key))

    async def delete_many(self, keys: Iterable[str]) -> None:
        """Delete several keys with a single DEL."""
        full_keys = [self._key(key) for key in keys]
        if full_keys:
            await self._command("delete_many", None, "DEL", *full_keys)

    async def scan(
        self, cursor: int, *, match: str, count: int = SCAN_COUNT
    ) -> tuple[int, list[str]]:
        """SCAN one page of keys matching a glob pattern."""
        next_cursor, keys = await self._command(
            "scan", match, "SCAN", str(cursor), "MATCH", self._key(match), "COUNT", count
        )
        if self._prefix:
            keys = [key.removeprefix(f"{self._prefix}:") for key in keys]
        return int(next_cursor), list(keys)

    async def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching a glob pattern via SCAN."""
        return await scan_delete(self, pattern)

    def start(self) -> None:
        """No background work for a remote store."""

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
