"""End-to-end usage recording and statistics over SQLite.

Tests cover:
- Recorded events land in the store with provenance from the request context
- Statistics computed from recorded events (error rate, LLM totals, violators)
- query_trail filters

Architecture:
- Real UsageRecorder, AuditStatisticsService and SQLAlchemyAuditAdapter
- SQLite in memory via aiosqlite; mocked logger
"""

import pytest

from src.application.services.audit_statistics import AuditStatisticsService
from src.application.services.usage_recorder import UsageRecorder
from src.core.request_context import (
    RequestContext,
    reset_request_context,
    set_request_context,
)
from src.domain.enums import AuditEventType, AuditSeverity


@pytest.fixture
def recorder(audit_store, mock_logger):
    return UsageRecorder(store=audit_store, logger=mock_logger, model_name="gemini-pro")


@pytest.fixture
def statistics(audit_store):
    return AuditStatisticsService(store=audit_store)


async def _record_errors(recorder, labels):
    for label in labels:
        await recorder.record_error(label, RuntimeError(f"{label} failed"))


@pytest.mark.integration
class TestRecordingFlow:
    async def test_request_context_stamped(self, recorder, audit_store):
        token = set_request_context(
            RequestContext(ip_address="198.51.100.4", user_agent="curl/8.5")
        )
        try:
            await recorder.record_rate_limit_violation(
                user_id="42", endpoint="/api/v1/auth/login", retry_after_seconds=60
            )
        finally:
            reset_request_context(token)

        events = (await recorder.query_trail(user_id="42")).value

        assert len(events) == 1
        assert events[0].ip_address == "198.51.100.4"
        assert events[0].user_agent == "curl/8.5"
        assert events[0].context["ip_address"] == "198.51.100.4"

    async def test_outside_request_provenance_is_empty(self, recorder):
        event = await recorder.record_user_action(user_id="42", action="export")

        assert event.ip_address is None
        assert event.user_agent is None

    async def test_query_trail_filters(self, recorder):
        await recorder.record_user_action(user_id="42", action="login")
        await recorder.record_error("db", RuntimeError("x"), user_id="42")
        await recorder.record_error(
            "db", RuntimeError("y"), severity=AuditSeverity.CRITICAL, user_id="42"
        )
        await recorder.record_error("db", RuntimeError("z"), user_id="7")

        errors = (await recorder.query_trail(user_id="42", event_type="error")).value
        critical = (await recorder.query_trail(severity="critical")).value

        assert len(errors) == 2
        assert all(e.event_type is AuditEventType.ERROR for e in errors)
        assert [e.context["error_message"] for e in critical] == ["y"]


@pytest.mark.integration
class TestStatisticsFlow:
    async def test_error_rate_and_top_contexts(self, recorder, statistics):
        """10 events, 2 of them errors -> 20.0%."""
        await _record_errors(recorder, ["llm_call", "llm_call"])
        for i in range(8):
            await recorder.record_user_action(user_id=str(i), action="view")

        stats = (await statistics.error_stats(within_days=7)).value

        assert stats.total_errors == 2
        assert stats.error_rate_percent == 20.0
        assert stats.top_error_contexts == {"llm_call": 2}
        assert stats.critical_errors == 0

    async def test_empty_store(self, statistics):
        stats = (await statistics.error_stats(within_days=7)).value

        assert stats.error_rate_percent == 0.0
        assert stats.total_errors == 0

    async def test_llm_usage(self, recorder, statistics):
        for duration, cost in ((1.23456, 0.123456), (0.5, 0.25)):
            await recorder.record_request_event(
                user_id="42",
                symbol="AAPL",
                prompt="Analyze",
                response={"signal": "hold"},
                duration_seconds=duration,
                cost_usd=cost,
            )

        stats = (await statistics.llm_usage_stats(within_days=7)).value

        # Stored values are 1.235 / 0.1235 and 0.5 / 0.25
        assert stats.total_requests == 2
        assert stats.total_cost_usd == 0.37
        assert stats.average_duration_seconds == 0.87
        assert stats.requests_per_day == 0.3

    async def test_rate_limit_violators(self, recorder, statistics):
        for user_id in ("42", "42", "7", None):
            await recorder.record_rate_limit_violation(
                user_id=user_id, endpoint="/api/v1/auth/login", retry_after_seconds=30
            )

        stats = (await statistics.rate_limit_stats(within_days=1)).value

        assert stats.total_violations == 4
        assert stats.unique_users == 2
        assert stats.violations_per_day == 4.0
        assert stats.top_violators == {"42": 2, "7": 1}
