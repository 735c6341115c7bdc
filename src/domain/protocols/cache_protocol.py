"""Cache protocol (port) for the shared key-value store.

This module defines what the rate limiter needs from the shared store,
without knowing about any specific implementation. Infrastructure adapters
implement this protocol (RedisAdapter) and tests substitute fakes.

Architecture:
- Protocol-based - uses structural typing
- All operations return Result types, never raise
- Atomicity guarantees are part of the contract (see each method)
"""

from typing import Protocol

from src.core.errors import DomainError
from src.core.result import Result


class CacheProtocol(Protocol):
    """Shared key-value store contract.

    Every method is a single round trip. Implementations MUST guarantee that
    ``set_if_absent`` and ``increment`` are atomic across processes.
    """

    async def set_if_absent(
        self, key: str, value: str, ttl: int
    ) -> Result[bool, DomainError]:
        """Atomically set ``key`` with expiry only if it does not exist.

        Args:
            key: Store key.
            value: Value to store.
            ttl: Expiry in seconds (> 0).

        Returns:
            Result with True if the key was set, False if it already existed,
            or an error.
        """
        ...

    async def ttl(self, key: str) -> Result[int | None, DomainError]:
        """Get remaining time to live.

        Returns:
            Result with seconds until expiry, None if the key does not exist
            or has no expiry, or an error.
        """
        ...

    async def delete(self, key: str) -> Result[bool, DomainError]:
        """Delete ``key`` unconditionally.

        Returns:
            Result with True if a key was removed, False if it was absent,
            or an error.
        """
        ...

    async def exists(self, key: str) -> Result[bool, DomainError]:
        """Check whether ``key`` exists."""
        ...

    async def increment(self, key: str, amount: int = 1) -> Result[int, DomainError]:
        """Atomically increment a counter (created at 0 if absent).

        Returns:
            Result with the post-increment value, or an error.
        """
        ...

    async def expire(self, key: str, seconds: int) -> Result[bool, DomainError]:
        """Set expiry on an existing key.

        Returns:
            Result with True if the expiry was set, False if the key does
            not exist, or an error.
        """
        ...

    async def delete_by_prefix(self, prefix: str) -> Result[int, DomainError]:
        """Delete every key starting with ``prefix``.

        Not atomic across keys. Administrative use only.

        Returns:
            Result with the number of keys removed, or an error.
        """
        ...

    async def ping(self) -> Result[bool, DomainError]:
        """Check store connectivity (health check)."""
        ...
