"""Unit tests for UsageRecorder.

Tests cover:
- Context shape per event type (rounding, payload sizes, provenance)
- Trace truncation
- Best-effort writes (store failure -> None, logged)
- Validation before any write
- query_trail filters and window

Architecture:
- Unit tests with AsyncMock AuditProtocol
"""

import json
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from freezegun import freeze_time

from src.application.services.usage_recorder import (
    MAX_TRACE_LENGTH,
    TRUNCATION_MARKER,
    UsageRecorder,
    payload_size,
    truncate_trace,
)
from src.core.enums import ErrorCode
from src.core.request_context import RequestContext
from src.core.result import Failure, Success
from src.domain.enums import AuditEventType, AuditSeverity
from src.domain.errors import AuditError

WRITE_FAILED = Failure(
    error=AuditError(code=ErrorCode.AUDIT_RECORD_FAILED, message="disk full")
)


@pytest.fixture
def mock_store():
    store = AsyncMock()
    store.append.side_effect = lambda event: Success(value=event)
    return store


@pytest.fixture
def recorder(mock_store, mock_logger):
    return UsageRecorder(
        store=mock_store,
        logger=mock_logger,
        request_context=lambda: RequestContext(
            ip_address="203.0.113.7", user_agent="pytest-agent"
        ),
        model_name="gemini-pro",
    )


def _raise(exc):
    try:
        raise exc
    except Exception as e:
        return e


@pytest.mark.unit
class TestTruncateTrace:
    """Traces are capped at 2000 characters plus a marker."""

    def test_long_trace_truncated(self):
        result = truncate_trace("x" * 2500)

        assert result == "x" * MAX_TRACE_LENGTH + TRUNCATION_MARKER
        assert len(result) == 2000 + len("... (truncated)")

    def test_short_trace_unchanged(self):
        trace = "y" * 500

        assert truncate_trace(trace) == trace

    def test_exact_limit_unchanged(self):
        trace = "z" * MAX_TRACE_LENGTH

        assert truncate_trace(trace) == trace


@pytest.mark.unit
class TestPayloadSize:
    def test_string_is_json_encoded(self):
        # Quotes are part of the encoding
        assert payload_size("abc") == 5

    def test_non_ascii_is_escaped(self):
        assert payload_size("é") == len(json.dumps("é"))

    def test_structured_payload(self):
        payload = {"symbol": "AAPL", "horizon": [1, 2]}

        assert payload_size(payload) == len(json.dumps(payload).encode("utf-8"))

    def test_circular_payload_falls_back_to_str(self):
        payload = []
        payload.append(payload)

        assert payload_size(payload) == len(str(payload))


@pytest.mark.unit
class TestRecordRequestEvent:
    async def test_rounds_duration_and_cost(self, recorder, mock_store):
        """Scenario: 1.23456 s -> 1.235, $0.123456 -> 0.1235."""
        event = await recorder.record_request_event(
            user_id="42",
            symbol="AAPL",
            prompt="Analyze AAPL",
            response={"signal": "buy"},
            duration_seconds=1.23456,
            cost_usd=0.123456,
        )

        assert event is not None
        assert event.event_type is AuditEventType.LLM_REQUEST
        assert event.severity is AuditSeverity.INFO
        assert event.user_id == "42"
        assert event.context["symbol"] == "AAPL"
        assert event.context["duration_seconds"] == 1.235
        assert event.context["cost_usd"] == 0.1235
        assert event.context["model"] == "gemini-pro"
        assert event.context["prompt_length"] == payload_size("Analyze AAPL")
        assert event.context["response_length"] == payload_size({"signal": "buy"})
        assert "Analyze AAPL" not in json.dumps(event.context)
        mock_store.append.assert_awaited_once_with(event)

    async def test_stamps_provenance(self, recorder):
        event = await recorder.record_request_event(
            user_id=None, symbol="MSFT", prompt="", response="", duration_seconds=0.1
        )

        assert event.ip_address == "203.0.113.7"
        assert event.user_agent == "pytest-agent"
        assert event.user_id is None

    @freeze_time("2026-03-01 12:00:00")
    async def test_timestamp_is_recording_time(self, recorder):
        event = await recorder.record_request_event(
            user_id="1", symbol="X", prompt="", response="", duration_seconds=0
        )

        assert event.context["timestamp"] == "2026-03-01T12:00:00+00:00"

    @pytest.mark.parametrize("bad", [float("inf"), float("-inf"), float("nan")])
    async def test_non_finite_numbers_stored_as_zero(self, recorder, mock_store, bad):
        event = await recorder.record_request_event(
            user_id="1",
            symbol="AAPL",
            prompt="",
            response="",
            duration_seconds=bad,
            cost_usd=bad,
        )

        assert event is not None
        assert event.context["duration_seconds"] == 0.0
        assert event.context["cost_usd"] == 0.0
        mock_store.append.assert_awaited_once()


@pytest.mark.unit
class TestRecordRateLimitViolation:
    async def test_context(self, recorder):
        event = await recorder.record_rate_limit_violation(
            user_id="42", endpoint="/api/v1/analysis/AAPL", retry_after_seconds=42
        )

        assert event.event_type is AuditEventType.RATE_LIMIT
        assert event.severity is AuditSeverity.WARNING
        assert event.context["endpoint"] == "/api/v1/analysis/AAPL"
        assert event.context["retry_after"] == 42
        assert event.context["ip_address"] == "203.0.113.7"
        assert event.context["attempted_at"] is not None

    async def test_non_finite_retry_after_stored_as_zero(self, recorder):
        event = await recorder.record_rate_limit_violation(
            user_id="42",
            endpoint="/api/v1/analysis/AAPL",
            retry_after_seconds=float("nan"),
        )

        assert event is not None
        assert event.context["retry_after"] == 0


@pytest.mark.unit
class TestRecordError:
    async def test_raised_error_captures_site_and_trace(self, recorder):
        error = _raise(KeyError("price"))

        event = await recorder.record_error("market_data_fetch", error)

        assert event.event_type is AuditEventType.ERROR
        assert event.severity is AuditSeverity.ERROR
        context = event.context
        assert context["label"] == "market_data_fetch"
        assert context["error_type"] == "KeyError"
        assert context["error_message"] == "'price'"
        assert context["file"].endswith("test_application_usage_recorder.py")
        assert isinstance(context["line"], int)
        assert "KeyError" in context["trace"]

    async def test_unraised_error_has_no_site(self, recorder):
        event = await recorder.record_error("validation", ValueError("bad input"))

        assert event.context["file"] is None
        assert event.context["line"] is None

    async def test_long_trace_is_truncated(self, recorder):
        error = _raise(RuntimeError("m" * 2500))

        event = await recorder.record_error("llm_call", error)

        trace = event.context["trace"]
        assert trace.endswith(TRUNCATION_MARKER)
        assert len(trace) == MAX_TRACE_LENGTH + len(TRUNCATION_MARKER)

    async def test_custom_severity(self, recorder):
        event = await recorder.record_error(
            "database", RuntimeError("gone"), severity="critical", user_id="7"
        )

        assert event.severity is AuditSeverity.CRITICAL
        assert event.is_critical()
        assert event.user_id == "7"

    async def test_invalid_severity_raises_before_write(self, recorder, mock_store):
        with pytest.raises(ValueError):
            await recorder.record_error("x", RuntimeError("y"), severity="fatal")

        mock_store.append.assert_not_called()


@pytest.mark.unit
class TestRecordUserAction:
    async def test_metadata_defaults_to_empty(self, recorder):
        event = await recorder.record_user_action(user_id="42", action="logout")

        assert event.context["action"] == "logout"
        assert event.context["metadata"] == {}

    async def test_metadata_is_copied(self, recorder):
        metadata = {"symbol": "AAPL"}

        event = await recorder.record_user_action(
            user_id="42", action="favorite_added", metadata=metadata
        )
        metadata["symbol"] = "MSFT"

        assert event.context["metadata"] == {"symbol": "AAPL"}

    async def test_metadata_normalized_to_json_types(self, recorder, mock_store):
        opened = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)

        event = await recorder.record_user_action(
            user_id="42",
            action="watchlist_saved",
            metadata={
                "symbols": ("AAPL", "MSFT"),
                "opened_at": opened,
                "score": float("nan"),
                "nested": {1: [("a", 1.5)]},
            },
        )

        assert event is not None
        assert event.context["metadata"] == {
            "symbols": ["AAPL", "MSFT"],
            "opened_at": str(opened),
            "score": None,
            "nested": {"1": [["a", 1.5]]},
        }
        json.dumps(event.context, allow_nan=False)
        mock_store.append.assert_awaited_once()


@pytest.mark.unit
class TestBestEffortWrites:
    async def test_store_failure_returns_none_and_logs(
        self, recorder, mock_store, mock_logger
    ):
        mock_store.append.side_effect = None
        mock_store.append.return_value = WRITE_FAILED

        result = await recorder.record_user_action(user_id="1", action="login")

        assert result is None
        mock_logger.error.assert_called_once()
        args, kwargs = mock_logger.error.call_args
        assert args[0] == "audit_record_failed"
        assert kwargs["error_code"] == ErrorCode.AUDIT_RECORD_FAILED.value
        assert kwargs["event_type"] == "user_action"


@pytest.mark.unit
class TestQueryTrail:
    @freeze_time("2026-03-31 00:00:00")
    async def test_passes_filters_and_window(self, recorder, mock_store):
        mock_store.query.return_value = Success(value=[])

        result = await recorder.query_trail(
            user_id="42",
            event_type="error",
            severity=AuditSeverity.CRITICAL,
            within_days=7,
            limit=50,
        )

        assert result == Success(value=[])
        mock_store.query.assert_awaited_once_with(
            user_id="42",
            event_type=AuditEventType.ERROR,
            severity=AuditSeverity.CRITICAL,
            since=datetime(2026, 3, 24, tzinfo=UTC),
            limit=50,
        )

    async def test_limit_capped(self, recorder, mock_store):
        mock_store.query.return_value = Success(value=[])

        await recorder.query_trail(limit=5000)

        assert mock_store.query.call_args.kwargs["limit"] == 1000

    async def test_store_failure_surfaces(self, recorder, mock_store):
        failure = Failure(
            error=AuditError(code=ErrorCode.AUDIT_QUERY_FAILED, message="down")
        )
        mock_store.query.return_value = failure

        assert await recorder.query_trail() == failure

    @pytest.mark.parametrize(
        "kwargs",
        [{"event_type": "login"}, {"severity": "fatal"}, {"within_days": 0}],
    )
    async def test_invalid_arguments(self, recorder, mock_store, kwargs):
        with pytest.raises(ValueError):
            await recorder.query_trail(**kwargs)

        mock_store.query.assert_not_called()

    async def test_window_default_thirty_days(self, recorder, mock_store):
        mock_store.query.return_value = Success(value=[])

        before = datetime.now(UTC)
        await recorder.query_trail()

        since = mock_store.query.call_args.kwargs["since"]
        assert before - since >= timedelta(days=30) - timedelta(seconds=5)
