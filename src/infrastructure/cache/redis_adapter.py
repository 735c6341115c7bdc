"""Redis adapter implementing CacheProtocol.

This adapter provides the Redis implementation of the lock store contract
defined in the domain layer. It wraps the async Redis client and maps every
Redis exception to a CacheError.

Architecture:
- Implements CacheProtocol without inheritance (structural typing)
- Maps Redis exceptions to CacheError with ErrorCode.CACHE_UNAVAILABLE
- Returns Result types for all operations, never raises
"""

from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.infrastructure.enums import InfrastructureErrorCode
from src.infrastructure.errors import CacheError


def _cache_failure(
    operation: str,
    error: Exception,
    infrastructure_code: InfrastructureErrorCode,
    key: str | None = None,
) -> Failure[CacheError]:
    """Wrap a Redis exception in a CacheError failure.

    Connection and timeout errors are reported as connection failures
    regardless of the operation that hit them.
    """
    if isinstance(error, (RedisConnectionError, RedisTimeoutError)):
        infrastructure_code = InfrastructureErrorCode.CACHE_CONNECTION_ERROR
    elif not isinstance(error, RedisError):
        infrastructure_code = InfrastructureErrorCode.CACHE_UNKNOWN_ERROR

    details: dict[str, str] = {
        "operation": operation,
        "error": str(error),
        "type": type(error).__name__,
    }
    if key is not None:
        details["key"] = key
        message = f"Cache {operation} failed for key '{key}'"
    else:
        message = f"Cache {operation} failed"

    return Failure(
        error=CacheError(
            code=ErrorCode.CACHE_UNAVAILABLE,
            infrastructure_code=infrastructure_code,
            message=message,
            details=details,
        )
    )


class RedisAdapter:
    """Redis implementation of CacheProtocol.

    Note: Does NOT inherit from CacheProtocol (uses structural typing).

    Attributes:
        _redis: Async Redis client instance.
    """

    def __init__(self, redis_client: Redis) -> None:
        """Initialize Redis adapter.

        Args:
            redis_client: Async Redis client instance.
        """
        self._redis = redis_client

    async def set_if_absent(
        self, key: str, value: str, ttl: int
    ) -> Result[bool, CacheError]:
        """Atomic SET key value EX ttl NX.

        Returns:
            Result with True if set, False if key already existed, or CacheError.
        """
        try:
            was_set = await self._redis.set(key, value, ex=ttl, nx=True)
            return Success(value=bool(was_set))
        except Exception as e:
            return _cache_failure(
                "set_if_absent", e, InfrastructureErrorCode.CACHE_SET_ERROR, key
            )

    async def ttl(self, key: str) -> Result[int | None, CacheError]:
        """Get time to live for key.

        Returns:
            Result with seconds until expiration, None if no TTL or key
            doesn't exist, or CacheError.
        """
        try:
            ttl_value = await self._redis.ttl(key)
            # Redis returns -2 if key doesn't exist, -1 if no expiration
            if ttl_value < 0:
                return Success(value=None)
            return Success(value=int(ttl_value))
        except Exception as e:
            return _cache_failure("ttl", e, InfrastructureErrorCode.CACHE_GET_ERROR, key)

    async def delete(self, key: str) -> Result[bool, CacheError]:
        """Delete key.

        Returns:
            Result with True if deleted, False if key didn't exist, or CacheError.
        """
        try:
            deleted_count = await self._redis.delete(key)
            return Success(value=deleted_count > 0)
        except Exception as e:
            return _cache_failure(
                "delete", e, InfrastructureErrorCode.CACHE_DELETE_ERROR, key
            )

    async def exists(self, key: str) -> Result[bool, CacheError]:
        """Check if key exists."""
        try:
            exists_count = await self._redis.exists(key)
            return Success(value=exists_count > 0)
        except Exception as e:
            return _cache_failure(
                "exists", e, InfrastructureErrorCode.CACHE_GET_ERROR, key
            )

    async def increment(self, key: str, amount: int = 1) -> Result[int, CacheError]:
        """Atomic INCRBY.

        Returns:
            Result with new value after increment, or CacheError.
        """
        try:
            new_value = await self._redis.incrby(key, amount)
            return Success(value=int(new_value))
        except Exception as e:
            return _cache_failure(
                "increment", e, InfrastructureErrorCode.CACHE_SET_ERROR, key
            )

    async def expire(self, key: str, seconds: int) -> Result[bool, CacheError]:
        """Set expiration on key.

        Returns:
            Result with True if timeout set, False if key doesn't exist, or CacheError.
        """
        try:
            was_set = await self._redis.expire(key, seconds)
            return Success(value=bool(was_set))
        except Exception as e:
            return _cache_failure(
                "expire", e, InfrastructureErrorCode.CACHE_SET_ERROR, key
            )

    async def delete_by_prefix(self, prefix: str) -> Result[int, CacheError]:
        """Delete every key starting with ``prefix``.

        Uses SCAN rather than KEYS so large keyspaces do not block the server.
        Keys written during the scan may survive.

        Returns:
            Result with number of keys deleted, or CacheError.
        """
        try:
            deleted = 0
            batch: list[str | bytes] = []
            async for key in self._redis.scan_iter(match=f"{prefix}*", count=500):
                batch.append(key)
                if len(batch) >= 500:
                    deleted += await self._redis.delete(*batch)
                    batch.clear()
            if batch:
                deleted += await self._redis.delete(*batch)
            return Success(value=deleted)
        except Exception as e:
            return _cache_failure(
                "delete_by_prefix", e, InfrastructureErrorCode.CACHE_DELETE_ERROR
            )

    async def ping(self) -> Result[bool, CacheError]:
        """Check Redis connectivity (health check).

        Returns:
            Result with True if Redis is reachable, or CacheError.
        """
        try:
            # Type ignore due to redis.asyncio ping() return type ambiguity
            await self._redis.ping()  # type: ignore[misc]
            return Success(value=True)
        except Exception as e:
            return _cache_failure(
                "ping", e, InfrastructureErrorCode.CACHE_CONNECTION_ERROR
            )
