"""Unit tests for RateLimiterAdapter.

Tests cover:
- Gate semantics (attempt) against a mocked CacheProtocol
- Counter semantics (increment, too_many_attempts)
- Fail-open behavior on every store failure
- Contract violations raising ValueError before touching the store

Architecture:
- Unit tests with AsyncMock cache
- NO Redis dependency (see integration tests for fakeredis)
"""

from unittest.mock import AsyncMock

import pytest

from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.infrastructure.enums import InfrastructureErrorCode
from src.infrastructure.errors import CacheError
from src.infrastructure.rate_limit.rate_limiter_adapter import RateLimiterAdapter

STORE_DOWN = Failure(
    error=CacheError(
        code=ErrorCode.CACHE_UNAVAILABLE,
        infrastructure_code=InfrastructureErrorCode.CACHE_CONNECTION_ERROR,
        message="Cache ping failed",
    )
)


@pytest.fixture
def mock_cache():
    return AsyncMock()


@pytest.fixture
def limiter(mock_cache, mock_logger):
    return RateLimiterAdapter(cache=mock_cache, logger=mock_logger)


@pytest.mark.unit
class TestAttempt:
    async def test_acquired_marker_allows(self, limiter, mock_cache):
        # Arrange
        mock_cache.set_if_absent.return_value = Success(value=True)

        # Act
        decision = await limiter.attempt("user:42:login", 60)

        # Assert
        assert decision.allowed is True
        assert decision.retry_after_seconds == 0
        key, value, ttl = mock_cache.set_if_absent.call_args.args
        assert key == "rate_limit:user:42:login"
        assert value.isdigit()
        assert ttl == 60
        mock_cache.ttl.assert_not_called()

    async def test_existing_marker_denies_with_ttl(self, limiter, mock_cache):
        mock_cache.set_if_absent.return_value = Success(value=False)
        mock_cache.ttl.return_value = Success(value=57)

        decision = await limiter.attempt("user:42:login", 60)

        assert decision.allowed is False
        assert decision.retry_after_seconds == 57

    async def test_marker_expiring_between_calls_denies_with_zero(
        self, limiter, mock_cache
    ):
        """TTL reports missing key (None) after SET NX lost the race."""
        mock_cache.set_if_absent.return_value = Success(value=False)
        mock_cache.ttl.return_value = Success(value=None)

        decision = await limiter.attempt("k", 60)

        assert decision.allowed is False
        assert decision.retry_after_seconds == 0

    async def test_store_failure_fails_open(self, limiter, mock_cache, mock_logger):
        mock_cache.set_if_absent.return_value = STORE_DOWN

        decision = await limiter.attempt("k", 60)

        assert decision.allowed is True
        assert decision.retry_after_seconds == 0
        mock_logger.error.assert_called_once()
        _, kwargs = mock_logger.error.call_args
        assert kwargs["key"] == "rate_limit:k"
        assert kwargs["error_code"] == ErrorCode.RATE_LIMIT_CHECK_FAILED.value
        assert kwargs["cause_code"] == ErrorCode.CACHE_UNAVAILABLE.value

    async def test_ttl_failure_fails_open(self, limiter, mock_cache, mock_logger):
        mock_cache.set_if_absent.return_value = Success(value=False)
        mock_cache.ttl.return_value = STORE_DOWN

        decision = await limiter.attempt("k", 60)

        assert decision.allowed is True
        mock_logger.error.assert_called_once()

    @pytest.mark.parametrize("ttl", [0, -1])
    async def test_non_positive_ttl_rejected(self, limiter, mock_cache, ttl):
        with pytest.raises(ValueError):
            await limiter.attempt("k", ttl)

        mock_cache.set_if_absent.assert_not_called()


@pytest.mark.unit
class TestFailOpenQueries:
    """Store unavailable -> permissive values."""

    async def test_is_locked_false(self, limiter, mock_cache):
        mock_cache.exists.return_value = STORE_DOWN

        assert await limiter.is_locked("k") is False

    async def test_remaining_time_zero(self, limiter, mock_cache):
        mock_cache.ttl.return_value = STORE_DOWN

        assert await limiter.remaining_time("k") == 0

    async def test_reset_logs_and_returns(self, limiter, mock_cache, mock_logger):
        mock_cache.delete.return_value = STORE_DOWN

        assert await limiter.reset("k") is None
        _, kwargs = mock_logger.error.call_args
        assert kwargs["error_code"] == ErrorCode.RATE_LIMIT_RESET_FAILED.value

    async def test_clear_all_zero(self, limiter, mock_cache):
        mock_cache.delete_by_prefix.return_value = STORE_DOWN

        assert await limiter.clear_all() == 0

    async def test_get_info_on_failure(self, limiter, mock_cache):
        mock_cache.exists.return_value = STORE_DOWN
        mock_cache.ttl.return_value = STORE_DOWN

        info = await limiter.get_info("k")

        assert info.locked is False
        assert info.remaining_time == 0
        assert info.key == "rate_limit:k"


@pytest.mark.unit
class TestCounter:
    async def test_first_increment_sets_expiry(self, limiter, mock_cache):
        mock_cache.increment.return_value = Success(value=1)
        mock_cache.expire.return_value = Success(value=True)

        assert await limiter.increment("k", 30) == 1
        mock_cache.expire.assert_awaited_once_with("rate_limit:k", 30)

    async def test_later_increment_keeps_window(self, limiter, mock_cache):
        mock_cache.increment.return_value = Success(value=4)

        assert await limiter.increment("k", 30) == 4
        mock_cache.expire.assert_not_called()

    async def test_expire_failure_is_logged(self, limiter, mock_cache, mock_logger):
        mock_cache.increment.return_value = Success(value=1)
        mock_cache.expire.return_value = STORE_DOWN

        assert await limiter.increment("k") == 1
        event = mock_logger.error.call_args.args[0]
        assert event == "rate_limit_expire_failed"

    async def test_increment_failure_returns_zero(self, limiter, mock_cache):
        mock_cache.increment.return_value = STORE_DOWN

        assert await limiter.increment("k") == 0

    async def test_too_many_attempts_threshold(self, limiter, mock_cache):
        """Counts 1..4 against max 3."""
        mock_cache.increment.side_effect = [Success(value=n) for n in (1, 2, 3, 4)]
        mock_cache.expire.return_value = Success(value=True)

        results = [await limiter.too_many_attempts("k", 3, 60) for _ in range(4)]

        assert results == [False, False, False, True]

    async def test_too_many_attempts_fails_open(self, limiter, mock_cache):
        mock_cache.increment.return_value = STORE_DOWN

        assert await limiter.too_many_attempts("k", 0, 60) is False

    async def test_negative_max_attempts_rejected(self, limiter, mock_cache):
        with pytest.raises(ValueError):
            await limiter.too_many_attempts("k", -1, 60)

        mock_cache.increment.assert_not_called()


@pytest.mark.unit
class TestConstruction:
    def test_custom_prefix(self, mock_cache, mock_logger):
        limiter = RateLimiterAdapter(cache=mock_cache, logger=mock_logger, prefix="rl:")

        assert limiter.prefix == "rl:"

    def test_empty_prefix_rejected(self, mock_cache, mock_logger):
        with pytest.raises(ValueError):
            RateLimiterAdapter(cache=mock_cache, logger=mock_logger, prefix="")
