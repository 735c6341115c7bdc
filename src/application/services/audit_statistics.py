"""Aggregated statistics over the audit trail.

Reads a trailing window of events through AuditProtocol and reduces them to
ErrorStats, LLMUsageStats and RateLimitStats. Events are fetched oldest
first so rankings break ties by first appearance.

Usage:
    service = AuditStatisticsService(store=audit_store)

    match await service.error_stats(within_days=7):
        case Success(value=stats):
            return stats.to_dict()
        case Failure(error=error):
            ...
"""

from __future__ import annotations

import math
from collections import Counter
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Iterable

from src.core.numeric import round_half_up
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditEventType
from src.domain.value_objects.audit_statistics import (
    ErrorStats,
    LLMUsageStats,
    RateLimitStats,
)

if TYPE_CHECKING:
    from src.domain.errors import AuditError
    from src.domain.protocols.audit_protocol import AuditProtocol

TOP_N = 5


def _top(values: Iterable[str], n: int = TOP_N) -> dict[str, int]:
    """Top ``n`` values by count; ties keep first-seen order."""
    return dict(Counter(values).most_common(n))


def _window_start(within_days: int) -> datetime:
    if within_days <= 0:
        raise ValueError(f"within_days must be > 0, got {within_days}")
    return datetime.now(UTC) - timedelta(days=within_days)


def _as_float(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


class AuditStatisticsService:
    """Computes usage statistics from the audit store.

    Args:
        store: Audit store implementing AuditProtocol.
    """

    def __init__(self, *, store: AuditProtocol) -> None:
        self._store = store

    async def error_stats(
        self, within_days: int = 7
    ) -> Result[ErrorStats, AuditError]:
        """Error totals and the most frequent error labels.

        error_rate_percent is errors over all events in the window, as a
        percentage (2 dp), and 0.0 for an empty window. Both counts come
        from one read of the window. Errors without a label count toward
        the totals but are left out of top_error_contexts.

        Raises:
            ValueError: If within_days <= 0.
        """
        since = _window_start(within_days)

        match await self._store.fetch_window(since=since):
            case Failure(error=error):
                return Failure(error=error)
            case Success(value=events):
                pass

        errors = [e for e in events if e.event_type is AuditEventType.ERROR]
        total_events = len(events)
        total_errors = len(errors)
        error_rate = (
            round_half_up(100 * total_errors / total_events, 2)
            if total_events
            else 0.0
        )
        labels = [str(label) for e in errors if (label := e.context.get("label"))]

        return Success(
            value=ErrorStats(
                total_errors=total_errors,
                critical_errors=sum(1 for event in errors if event.is_critical()),
                error_rate_percent=error_rate,
                top_error_contexts=_top(labels),
            )
        )

    async def llm_usage_stats(
        self, within_days: int = 7
    ) -> Result[LLMUsageStats, AuditError]:
        """LLM request volume, cost and latency.

        Raises:
            ValueError: If within_days <= 0.
        """
        since = _window_start(within_days)

        match await self._store.fetch_window(
            since=since, event_type=AuditEventType.LLM_REQUEST
        ):
            case Failure(error=error):
                return Failure(error=error)
            case Success(value=requests):
                pass

        total = len(requests)
        total_cost = math.fsum(_as_float(e.context.get("cost_usd")) for e in requests)
        total_duration = math.fsum(
            _as_float(e.context.get("duration_seconds")) for e in requests
        )

        return Success(
            value=LLMUsageStats(
                total_requests=total,
                total_cost_usd=round_half_up(total_cost, 2),
                average_duration_seconds=(
                    round_half_up(total_duration / total, 2) if total else 0.0
                ),
                requests_per_day=round_half_up(total / within_days, 1),
            )
        )

    async def rate_limit_stats(
        self, within_days: int = 7
    ) -> Result[RateLimitStats, AuditError]:
        """Rate limit violation totals and the most frequent violators.

        Events without a user are counted in the total but excluded from
        unique_users and top_violators.

        Raises:
            ValueError: If within_days <= 0.
        """
        since = _window_start(within_days)

        match await self._store.fetch_window(
            since=since, event_type=AuditEventType.RATE_LIMIT
        ):
            case Failure(error=error):
                return Failure(error=error)
            case Success(value=violations):
                pass

        user_ids = [e.user_id for e in violations if e.user_id is not None]

        return Success(
            value=RateLimitStats(
                total_violations=len(violations),
                unique_users=len(set(user_ids)),
                violations_per_day=round_half_up(len(violations) / within_days, 1),
                top_violators=_top(user_ids),
            )
        )
