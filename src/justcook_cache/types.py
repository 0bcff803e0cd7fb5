"""Core types for justcook-cache."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

T = TypeVar("T")

# Named cache classes; consumers pick one of these, never raw seconds
TTLTier = Literal[
    "trending",
    "discover",
    "chef_profile",
    "recipe_stats",
    "categories",
    "static_data",
]

Factory = Callable[[], Awaitable[T]]


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    """A cached value with its expiry (store clock, seconds)."""

    value: T
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """Check if the entry is dead at ``now``."""
        return now > self.expires_at
