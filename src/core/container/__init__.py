"""Container module - Centralized dependency injection.

Re-exports all factory functions so callers import from one place:

    from src.core.container import get_rate_limiter, get_usage_recorder

Architecture:
    - Application-scoped: @lru_cache() decorated functions (singletons)
    - Request-scoped: FastAPI dependencies with yield (per-request)
"""

from src.core.container.infrastructure import (
    get_audit_session,
    get_audit_statistics,
    get_audit_store,
    get_cache,
    get_database,
    get_logger,
    get_rate_limiter,
    get_usage_recorder,
)

__all__ = [
    "get_audit_session",
    "get_audit_statistics",
    "get_audit_store",
    "get_cache",
    "get_database",
    "get_logger",
    "get_rate_limiter",
    "get_usage_recorder",
]
