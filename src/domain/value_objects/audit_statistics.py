"""Aggregated audit statistics (value objects).

Read-only summaries computed by AuditStatisticsService over a trailing
window of days. Decimal-place counts are part of the contract:

    ErrorStats.error_rate_percent           2 dp
    LLMUsageStats.total_cost_usd            2 dp
    LLMUsageStats.average_duration_seconds  2 dp
    LLMUsageStats.requests_per_day          1 dp
    RateLimitStats.violations_per_day       1 dp

Ranked mappings (top_error_contexts, top_violators) hold at most five
entries, ordered by descending count with ties in first-seen order.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True, kw_only=True)
class ErrorStats:
    """Error summary for a window."""

    total_errors: int
    critical_errors: int
    error_rate_percent: float
    top_error_contexts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses."""
        return {
            "total_errors": self.total_errors,
            "critical_errors": self.critical_errors,
            "error_rate": self.error_rate_percent,
            "top_error_contexts": dict(self.top_error_contexts),
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class LLMUsageStats:
    """LLM request volume and cost for a window."""

    total_requests: int
    total_cost_usd: float
    average_duration_seconds: float
    requests_per_day: float

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses."""
        return {
            "total_requests": self.total_requests,
            "total_cost_usd": self.total_cost_usd,
            "average_duration": self.average_duration_seconds,
            "requests_per_day": self.requests_per_day,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitStats:
    """Rate limit violation summary for a window."""

    total_violations: int
    unique_users: int
    violations_per_day: float
    top_violators: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses."""
        return {
            "total_violations": self.total_violations,
            "unique_users": self.unique_users,
            "violations_per_day": self.violations_per_day,
            "top_violators": dict(self.top_violators),
        }
