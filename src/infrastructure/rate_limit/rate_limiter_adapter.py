"""Lock-based rate limiter implementing RateLimitProtocol.

Two primitives over the shared key-value store:
    - Gate: ``attempt`` writes a self-expiring marker with SET NX EX. The
      caller that creates the marker is allowed; every other caller is
      denied until it expires.
    - Counter: ``increment`` counts attempts in a fixed window that starts
      at the first increment. ``too_many_attempts`` compares the count
      against a threshold.

Architecture:
    Domain Protocol <- RateLimiterAdapter -> CacheProtocol (RedisAdapter) -> Redis

Usage:
    from src.core.container import get_rate_limiter

    rate_limiter = get_rate_limiter()
    decision = await rate_limiter.attempt("analysis:generate:user:42", 3600)

Fail-Open Design:
    Store failures never propagate. The gate allows, the counter reports 0,
    checks report False. Each failure is logged with the key and the store
    error so outages are visible.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.value_objects.rate_limit_decision import (
    RateLimitDecision,
    RateLimitInfo,
)

if TYPE_CHECKING:
    from src.core.errors import DomainError
    from src.domain.protocols.cache_protocol import CacheProtocol
    from src.domain.protocols.logger_protocol import LoggerProtocol

DEFAULT_PREFIX = "rate_limit:"


def _require_positive_ttl(ttl_seconds: int) -> None:
    if ttl_seconds <= 0:
        raise ValueError(f"ttl_seconds must be > 0, got {ttl_seconds}")


class RateLimiterAdapter:
    """Gate and counter rate limiter implementing RateLimitProtocol.

    Holds no in-process state: every decision is made by the store, so any
    number of workers can share one Redis.

    Args:
        cache: Store handle implementing CacheProtocol.
        logger: Structured logger for failure reporting.
        prefix: Namespace prepended to every key.
    """

    def __init__(
        self,
        *,
        cache: CacheProtocol,
        logger: LoggerProtocol,
        prefix: str = DEFAULT_PREFIX,
    ) -> None:
        if not prefix:
            raise ValueError("prefix must be non-empty")
        self._cache = cache
        self._logger = logger
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    # -------------------------------------------------------------------------
    # Gate
    # -------------------------------------------------------------------------
    async def attempt(self, key: str, ttl_seconds: int = 60) -> RateLimitDecision:
        """Try to acquire the gate for ``key``.

        Of any number of concurrent callers on a free key, exactly one is
        allowed. The marker value is the acquisition time (unix seconds).

        Raises:
            ValueError: If ttl_seconds <= 0.
        """
        _require_positive_ttl(ttl_seconds)
        full_key = self._full_key(key)

        acquired = await self._cache.set_if_absent(
            full_key, str(int(time.time())), ttl_seconds
        )
        match acquired:
            case Success(value=True):
                return RateLimitDecision.allow()
            case Success(value=False):
                pass
            case Failure(error=error):
                self._log_failure("rate_limit_attempt_failed", full_key, error)
                return RateLimitDecision.allow()

        ttl_result = await self._cache.ttl(full_key)
        match ttl_result:
            case Success(value=remaining):
                # Marker may expire between SET and TTL; clamp to 0
                return RateLimitDecision.deny(remaining or 0)
            case Failure(error=error):
                self._log_failure("rate_limit_ttl_failed", full_key, error)
                return RateLimitDecision.allow()

    async def reset(self, key: str) -> None:
        """Remove the marker or counter for ``key``. Idempotent."""
        full_key = self._full_key(key)
        result = await self._cache.delete(full_key)
        if isinstance(result, Failure):
            self._log_failure(
                "rate_limit_reset_failed",
                full_key,
                result.error,
                code=ErrorCode.RATE_LIMIT_RESET_FAILED,
            )

    async def remaining_time(self, key: str) -> int:
        """Seconds until ``key`` expires; 0 when absent or on failure."""
        full_key = self._full_key(key)
        match await self._cache.ttl(full_key):
            case Success(value=remaining):
                return max(remaining or 0, 0)
            case Failure(error=error):
                self._log_failure("rate_limit_ttl_failed", full_key, error)
                return 0

    async def is_locked(self, key: str) -> bool:
        """Whether a marker exists for ``key``; False on failure."""
        full_key = self._full_key(key)
        match await self._cache.exists(full_key):
            case Success(value=exists):
                return exists
            case Failure(error=error):
                self._log_failure("rate_limit_exists_failed", full_key, error)
                return False

    async def get_info(self, key: str) -> RateLimitInfo:
        """Lock state snapshot for ``key``."""
        return RateLimitInfo(
            key=self._full_key(key),
            locked=await self.is_locked(key),
            remaining_time=await self.remaining_time(key),
        )

    # -------------------------------------------------------------------------
    # Counter
    # -------------------------------------------------------------------------
    async def increment(self, key: str, ttl_seconds: int = 60) -> int:
        """Increment the window counter for ``key``.

        The expiry is set only by the increment that creates the counter,
        so the window is fixed from the first attempt.

        Returns:
            Post-increment value, or 0 on store failure.

        Raises:
            ValueError: If ttl_seconds <= 0.
        """
        _require_positive_ttl(ttl_seconds)
        full_key = self._full_key(key)

        match await self._cache.increment(full_key):
            case Success(value=count):
                pass
            case Failure(error=error):
                self._log_failure("rate_limit_increment_failed", full_key, error)
                return 0

        if count == 1:
            expired = await self._cache.expire(full_key, ttl_seconds)
            if isinstance(expired, Failure):
                # Counter exists without expiry until reset; surface it
                self._log_failure("rate_limit_expire_failed", full_key, expired.error)

        return count

    async def too_many_attempts(
        self, key: str, max_attempts: int, ttl_seconds: int = 60
    ) -> bool:
        """Count this attempt and check it against ``max_attempts``.

        Mutates state: call exactly once per real attempt.

        Raises:
            ValueError: If max_attempts < 0 or ttl_seconds <= 0.
        """
        if max_attempts < 0:
            raise ValueError(f"max_attempts must be >= 0, got {max_attempts}")
        _require_positive_ttl(ttl_seconds)

        count = await self.increment(key, ttl_seconds)
        if count == 0:
            return False
        return count > max_attempts

    async def clear_all(self) -> int:
        """Delete every key under this limiter's prefix.

        Operational tool only: not atomic, and slow on large keyspaces.

        Returns:
            Number of keys removed (0 on failure).
        """
        match await self._cache.delete_by_prefix(self._prefix):
            case Success(value=deleted):
                self._logger.info(
                    "rate_limit_cleared", prefix=self._prefix, deleted=deleted
                )
                return deleted
            case Failure(error=error):
                self._log_failure(
                    "rate_limit_clear_failed",
                    f"{self._prefix}*",
                    error,
                    code=ErrorCode.RATE_LIMIT_RESET_FAILED,
                )
                return 0

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------
    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def _log_failure(
        self,
        event: str,
        key: str,
        cause: DomainError,
        *,
        code: ErrorCode = ErrorCode.RATE_LIMIT_CHECK_FAILED,
    ) -> None:
        self._logger.error(
            event,
            key=key,
            error_code=code.value,
            error_message=cause.message,
            cause_code=cause.code.value,
        )
