"""Exceptions raised by justcook-cache."""


class CacheError(Exception):
    """Base exception for cache-related errors."""


class StoreError(CacheError):
    """A backing store operation failed (transport error, timeout, bad reply)."""

    def __init__(self, operation: str, key: str | None, message: str) -> None:
        self.operation = operation
        self.key = key
        target = f" {key!r}" if key is not None else ""
        super().__init__(f"{operation}{target}: {message}")


class UnknownTTLTierError(CacheError, ValueError):
    """Raised when a TTL tier name is not in the policy table."""
