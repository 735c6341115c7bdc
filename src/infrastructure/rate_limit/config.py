"""Rate limit table: tiers and per-endpoint windows.

Single source of truth for how many attempts each endpoint allows and over
which window. The ``throttle`` dependency looks limits up here by endpoint
name ("<area>.<action>").

Usage:
    from src.infrastructure.rate_limit.config import get_endpoint_limit

    limit = get_endpoint_limit("analysis.generate")
    limit.max_attempts, limit.window_seconds  # (5, 3600)
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

MINUTE = 60
HOUR = 60 * MINUTE


@dataclass(frozen=True, slots=True, kw_only=True)
class EndpointLimit:
    """Fixed window limit.

    Attributes:
        max_attempts: Attempts allowed inside one window.
        window_seconds: Window length, starting at the first attempt.
    """

    max_attempts: int
    window_seconds: int = MINUTE

    def __post_init__(self) -> None:
        if self.max_attempts < 0:
            raise ValueError(f"max_attempts must be >= 0, got {self.max_attempts}")
        if self.window_seconds <= 0:
            raise ValueError(f"window_seconds must be > 0, got {self.window_seconds}")


RATE_LIMIT_TIERS: Mapping[str, EndpointLimit] = MappingProxyType(
    {
        "anonymous": EndpointLimit(max_attempts=10),
        "authenticated": EndpointLimit(max_attempts=60),
        "premium": EndpointLimit(max_attempts=300),
    }
)

DEFAULT_TIER = "authenticated"

ENDPOINT_LIMITS: Mapping[str, EndpointLimit] = MappingProxyType(
    {
        # Authentication
        "auth.login": EndpointLimit(max_attempts=5),
        "auth.register": EndpointLimit(max_attempts=5),
        "auth.refresh": EndpointLimit(max_attempts=10),
        "auth.profile": EndpointLimit(max_attempts=10),
        # Analysis (LLM backed, expensive)
        "analysis.generate": EndpointLimit(max_attempts=5, window_seconds=HOUR),
        "analysis.history": EndpointLimit(max_attempts=60),
        "analysis.show": EndpointLimit(max_attempts=60),
        # Market data
        "market.overview": EndpointLimit(max_attempts=60),
        "market.tickers": EndpointLimit(max_attempts=60),
        # Quant
        "quant.indicators": EndpointLimit(max_attempts=60),
        "quant.trends": EndpointLimit(max_attempts=60),
        "quant.volatility": EndpointLimit(max_attempts=60),
        # Sentiment
        "sentiment.show": EndpointLimit(max_attempts=30),
        "sentiment.news": EndpointLimit(max_attempts=30),
    }
)


def get_endpoint_limit(endpoint_name: str) -> EndpointLimit:
    """Look up the limit for an endpoint, falling back to the default tier."""
    return ENDPOINT_LIMITS.get(endpoint_name, RATE_LIMIT_TIERS[DEFAULT_TIER])
