"""Shared pytest fixtures."""

from typing import Any

import pytest

from justcook_cache import Cache, MemoryStore, StoreError


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingStore:
    """Store whose backend is unreachable: every operation raises."""

    distributed = True

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def _fail(self, operation: str, key: str | None) -> Any:
        self.calls.append(operation)
        raise StoreError(operation, key, "connection refused")

    async def get(self, key: str) -> Any | None:
        return await self._fail("get", key)

    async def set(
        self, key: str, value: Any, *, ttl_seconds: int, only_if_absent: bool = False
    ) -> bool:
        return await self._fail("set", key)

    async def delete(self, key: str) -> None:
        await self._fail("delete", key)

    async def delete_many(self, keys: Any) -> None:
        await self._fail("delete_many", None)

    async def scan(self, cursor: int, *, match: str, count: int = 100) -> tuple[int, list[str]]:
        return await self._fail("scan", match)

    async def delete_pattern(self, pattern: str) -> int:
        return await self._fail("delete_pattern", pattern)

    def start(self) -> None:
        self.calls.append("start")

    async def disconnect(self) -> None:
        pass


@pytest.fixture
def clock() -> FakeClock:
    """Create a fake clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
async def memory_store(clock: FakeClock):
    """Create a fresh MemoryStore driven by the fake clock."""
    store = MemoryStore(clock=clock)
    yield store
    await store.disconnect()


@pytest.fixture
async def cache():
    """Create a Cache over a real-time MemoryStore."""
    cache = Cache(MemoryStore())
    yield cache
    await cache.close()


@pytest.fixture
def failing_store() -> FailingStore:
    """Create a store that raises on every call."""
    return FailingStore()
