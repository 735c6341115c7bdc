"""Rate limit infrastructure adapters.

Exports:
    RateLimiterAdapter: Gate and counter limiter implementing RateLimitProtocol.
    EndpointLimit: Fixed window limit.
    ENDPOINT_LIMITS: Endpoint name to limit mapping.
    RATE_LIMIT_TIERS: Per-tier default limits.
    get_endpoint_limit: Lookup with default-tier fallback.
"""

from src.infrastructure.rate_limit.config import (
    ENDPOINT_LIMITS,
    RATE_LIMIT_TIERS,
    EndpointLimit,
    get_endpoint_limit,
)
from src.infrastructure.rate_limit.rate_limiter_adapter import RateLimiterAdapter

__all__ = [
    "ENDPOINT_LIMITS",
    "RATE_LIMIT_TIERS",
    "EndpointLimit",
    "RateLimiterAdapter",
    "get_endpoint_limit",
]
