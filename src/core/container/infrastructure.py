# mypy: disable-error-code="arg-type"
"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Cache (Redis)
- Database (SQLAlchemy async engine)
- Rate limiting (gate and counter over Redis)
- Logging (structlog console adapter)

Request-scoped dependencies (one audit session per request):
- Audit session, audit store, usage recorder, statistics service
"""

from functools import lru_cache
from typing import TYPE_CHECKING, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.domain.protocols.audit_protocol import AuditProtocol
from src.infrastructure.persistence.database import Database

if TYPE_CHECKING:
    from src.application.services.audit_statistics import AuditStatisticsService
    from src.application.services.usage_recorder import UsageRecorder
    from src.domain.protocols.cache_protocol import CacheProtocol
    from src.domain.protocols.logger_protocol import LoggerProtocol
    from src.domain.protocols.rate_limit_protocol import RateLimitProtocol


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_cache() -> "CacheProtocol":
    """Get cache client singleton (app-scoped).

    Returns RedisAdapter over a shared connection pool. The socket timeout
    is short so a slow Redis makes the rate limiter fail open quickly
    instead of stalling requests.

    Usage:
        cache: CacheProtocol = Depends(get_cache)
    """
    from redis.asyncio import ConnectionPool, Redis

    from src.infrastructure.cache.redis_adapter import RedisAdapter

    pool = ConnectionPool.from_url(
        settings.redis_url,
        max_connections=settings.redis_max_connections,
        decode_responses=True,
        socket_connect_timeout=settings.redis_socket_timeout,
        socket_timeout=settings.redis_socket_timeout,
        socket_keepalive=True,
    )
    redis_client = Redis(connection_pool=pool)
    return RedisAdapter(redis_client=redis_client)


@lru_cache()
def get_database() -> Database:
    """Get database manager singleton (app-scoped).

    Use get_audit_session() for per-request sessions.
    """
    return Database(
        database_url=settings.database_url,
        echo=settings.db_echo,
    )


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Adapter selection is centralized here (composition root):
    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON)
    """
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    return ConsoleAdapter(
        use_json=not settings.is_development,
        level=settings.log_level,
    )


@lru_cache()
def get_rate_limiter() -> "RateLimitProtocol":
    """Get rate limiter singleton (app-scoped).

    Fail-Open Design:
        Store failures allow the request and are logged. Rate limiting
        should NEVER cause denial of service.
    """
    from src.infrastructure.rate_limit.rate_limiter_adapter import (
        RateLimiterAdapter,
    )

    return RateLimiterAdapter(
        cache=get_cache(),
        logger=get_logger(),
        prefix=settings.rate_limit_prefix,
    )


# ============================================================================
# Request-Scoped Dependencies (Per-Request)
# ============================================================================


async def get_audit_session() -> AsyncGenerator[AsyncSession, None]:
    """Get audit session (request-scoped, independent lifecycle).

    The audit store commits each event immediately, so records persist
    regardless of how the request ends.

    Yields:
        Database session for audit operations only.
    """
    db = get_database()
    async with db.get_session() as session:
        yield session


async def get_audit_store(
    audit_session: AsyncSession = Depends(get_audit_session),
) -> AuditProtocol:
    """Get audit store adapter (request-scoped).

    Args:
        audit_session: Independent database session for audit operations.
    """
    from src.infrastructure.audit.sqlalchemy_adapter import SQLAlchemyAuditAdapter

    return SQLAlchemyAuditAdapter(session=audit_session)


async def get_usage_recorder(
    store: AuditProtocol = Depends(get_audit_store),
) -> "UsageRecorder":
    """Get usage recorder (request-scoped, bound to the request's audit store)."""
    from src.application.services.usage_recorder import UsageRecorder

    return UsageRecorder(store=store, logger=get_logger())


async def get_audit_statistics(
    store: AuditProtocol = Depends(get_audit_store),
) -> "AuditStatisticsService":
    """Get audit statistics service (request-scoped)."""
    from src.application.services.audit_statistics import AuditStatisticsService

    return AuditStatisticsService(store=store)
