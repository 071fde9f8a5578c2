"""Cache protocol for the repository layer (DIP).

Implementations must be best-effort: backend failures are logged and
reported through return values, never raised to the caller.
"""

from typing import Protocol


class CacheProtocol(Protocol):
    """Protocol for cache backends (Redis in production, dict in tests)."""

    def is_available(self) -> bool:
        """Return True if cache is connected and usable."""
        ...

    async def get(self, key: str) -> str | None:
        """Return the raw cached text, or None on miss or failure."""
        ...

    async def set(self, key: str, value: str, ttl: int) -> bool:
        """Store value with TTL in seconds. Returns True on success."""
        ...

    async def delete(self, key: str) -> bool:
        """Remove key from cache. Returns True if the command succeeded."""
        ...

    async def delete_pattern(self, pattern: str) -> int:
        """Remove all keys matching a glob pattern. Returns the count removed."""
        ...
