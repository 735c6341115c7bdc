"""Rate limit protocol (port).

Defines the contract for the rate limiter. The infrastructure adapter
(RateLimiterAdapter) implements it over CacheProtocol.

Two primitives are offered:
    - Gate: ``attempt`` lets exactly one caller per key through per TTL
      window. The marker clears itself on expiry.
    - Counter: ``increment``/``too_many_attempts`` count attempts inside a
      window that starts at the first increment.

Usage:
    from src.domain.protocols import RateLimitProtocol

    decision = await rate_limiter.attempt("analysis:generate:user:42", 3600)
    if decision.is_denied:
        ...

Fail-Open Design:
    Every method degrades to the permissive value when the store fails
    (allowed / 0 / False). Failures are logged, never raised. A store
    outage must not become a denial of service.
"""

from typing import Protocol

from src.domain.value_objects.rate_limit_decision import (
    RateLimitDecision,
    RateLimitInfo,
)


class RateLimitProtocol(Protocol):
    """Protocol for rate limiting systems.

    Keys are opaque strings composed by callers; implementations add their
    own namespace prefix.
    """

    async def attempt(self, key: str, ttl_seconds: int = 60) -> RateLimitDecision:
        """Try to acquire the gate for ``key``.

        Args:
            key: Caller-composed key (e.g. "user:42:login").
            ttl_seconds: Lock duration (> 0).

        Returns:
            Allowed decision if the marker was set, otherwise a denied
            decision carrying the marker's remaining TTL.

        Raises:
            ValueError: If ttl_seconds <= 0.
        """
        ...

    async def reset(self, key: str) -> None:
        """Remove the marker or counter for ``key`` (idempotent)."""
        ...

    async def remaining_time(self, key: str) -> int:
        """Seconds until ``key`` expires, or 0 if absent."""
        ...

    async def is_locked(self, key: str) -> bool:
        """Whether a marker currently exists for ``key``."""
        ...

    async def get_info(self, key: str) -> RateLimitInfo:
        """Lock state and remaining time for ``key``."""
        ...

    async def increment(self, key: str, ttl_seconds: int = 60) -> int:
        """Increment the counter for ``key``.

        The window expiry is set when the counter is created.

        Returns:
            Post-increment value, or 0 when the store is unavailable.
        """
        ...

    async def too_many_attempts(
        self, key: str, max_attempts: int, ttl_seconds: int = 60
    ) -> bool:
        """Count this attempt and report whether the limit is exceeded.

        Mutates state: call exactly once per real attempt.
        """
        ...

    async def clear_all(self) -> int:
        """Delete every key owned by the limiter. Operational tool only.

        Returns:
            Number of keys removed (0 on failure).
        """
        ...
