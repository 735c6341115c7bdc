"""Domain value objects.

Immutable value objects that enforce business constraints.
"""

from src.domain.value_objects.audit_context import (
    AuditContext,
    ErrorContext,
    LLMRequestContext,
    RateLimitContext,
    UserActionContext,
    parse_context,
)
from src.domain.value_objects.audit_statistics import (
    ErrorStats,
    LLMUsageStats,
    RateLimitStats,
)
from src.domain.value_objects.rate_limit_decision import (
    RateLimitDecision,
    RateLimitInfo,
)

__all__ = [
    "AuditContext",
    "ErrorContext",
    "ErrorStats",
    "LLMRequestContext",
    "LLMUsageStats",
    "RateLimitContext",
    "RateLimitDecision",
    "RateLimitInfo",
    "RateLimitStats",
    "UserActionContext",
    "parse_context",
]
