"""Usage recorder: writes audit events for platform activity.

Four kinds of events are recorded: LLM requests, rate limit violations,
errors and user actions. Provenance (client IP and user agent) comes from
the ambient request context, never from the caller.

Recording is best-effort. A store failure is logged and the operation
returns None; the caller's request carries on.

Usage:
    recorder = UsageRecorder(store=audit_store, logger=logger)

    await recorder.record_request_event(
        user_id="42",
        symbol="AAPL",
        prompt=prompt,
        response=response,
        duration_seconds=1.23456,
        cost_usd=0.0012345,
    )

    try:
        ...
    except Exception as e:
        await recorder.record_error("market_data_fetch", e)
"""

from __future__ import annotations

import json
import math
import traceback
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, Callable

from src.core.config import settings
from src.core.numeric import round_half_up
from src.core.request_context import RequestContext, get_request_context
from src.core.result import Failure, Result, Success
from src.domain.entities.audit_event import AuditEvent
from src.domain.enums import AuditEventType, AuditSeverity
from src.domain.value_objects.audit_context import (
    ErrorContext,
    LLMRequestContext,
    RateLimitContext,
    UserActionContext,
)

if TYPE_CHECKING:
    from src.domain.errors import AuditError
    from src.domain.protocols.audit_protocol import AuditProtocol
    from src.domain.protocols.logger_protocol import LoggerProtocol

MAX_TRACE_LENGTH = 2000
TRUNCATION_MARKER = "... (truncated)"


def truncate_trace(trace: str, max_length: int = MAX_TRACE_LENGTH) -> str:
    """Cap a trace at ``max_length`` characters, marking the cut.

    Example:
        >>> len(truncate_trace("x" * 2500))
        2015
        >>> truncate_trace("short")
        'short'
    """
    if len(trace) <= max_length:
        return trace
    return trace[:max_length] + TRUNCATION_MARKER


def payload_size(payload: Any) -> int:
    """UTF-8 byte length of the JSON encoding of ``payload``.

    Used as a size proxy so raw prompts and responses are never stored.
    Payloads JSON cannot encode (circular references) fall back to the
    length of their string form.
    """
    try:
        encoded = json.dumps(payload, default=str)
    except ValueError:
        encoded = str(payload)
    return len(encoded.encode("utf-8"))


def json_safe(value: Any) -> Any:
    """Copy ``value`` into plain JSON types.

    Tuples and sets become lists, mapping keys become strings, non-finite
    floats become None and any other object is stored as its string form.

    Example:
        >>> json_safe({"tags": ("a", "b"), 1: float("nan")})
        {'tags': ['a', 'b'], '1': None}
    """
    if value is None or isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        return {str(key): json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [json_safe(item) for item in value]
    return str(value)


def _finite(value: float) -> float:
    """``value`` as a float, or 0.0 when it is NaN or infinite."""
    number = float(value)
    return number if math.isfinite(number) else 0.0


def _raise_site(error: BaseException) -> tuple[str | None, int | None]:
    """File and line of the frame that raised ``error``, if it was raised."""
    frames = traceback.extract_tb(error.__traceback__)
    if not frames:
        return None, None
    return frames[-1].filename, frames[-1].lineno


class UsageRecorder:
    """Records usage events to the audit store.

    Args:
        store: Audit store implementing AuditProtocol.
        logger: Structured logger.
        request_context: Callable returning the ambient RequestContext.
        model_name: LLM model name stamped on request events
            (defaults to ``settings.llm_model_name``).
    """

    def __init__(
        self,
        *,
        store: AuditProtocol,
        logger: LoggerProtocol,
        request_context: Callable[[], RequestContext] = get_request_context,
        model_name: str | None = None,
    ) -> None:
        self._store = store
        self._logger = logger
        self._request_context = request_context
        self._model_name = model_name or settings.llm_model_name

    async def record_request_event(
        self,
        *,
        user_id: str | None,
        symbol: str,
        prompt: Any,
        response: Any,
        duration_seconds: float,
        cost_usd: float = 0.0,
    ) -> AuditEvent | None:
        """Record an LLM request (severity info).

        Duration is rounded to 3 dp and cost to 4 dp. NaN or infinite
        values are stored as 0.0.
        """
        context = LLMRequestContext(
            symbol=symbol,
            prompt_length=payload_size(prompt),
            response_length=payload_size(response),
            duration_seconds=round_half_up(_finite(duration_seconds), 3),
            cost_usd=round_half_up(_finite(cost_usd), 4),
            model=self._model_name,
            timestamp=_now_iso(),
        )
        return await self._record(
            event_type=AuditEventType.LLM_REQUEST,
            context=context.to_dict(),
            severity=AuditSeverity.INFO,
            user_id=user_id,
        )

    async def record_rate_limit_violation(
        self,
        *,
        user_id: str | None,
        endpoint: str,
        retry_after_seconds: int,
    ) -> AuditEvent | None:
        """Record a rate limit denial (severity warning)."""
        context = RateLimitContext(
            endpoint=endpoint,
            retry_after=max(int(_finite(retry_after_seconds)), 0),
            attempted_at=_now_iso(),
            ip_address=self._request_context().ip_address,
        )
        return await self._record(
            event_type=AuditEventType.RATE_LIMIT,
            context=context.to_dict(),
            severity=AuditSeverity.WARNING,
            user_id=user_id,
        )

    async def record_error(
        self,
        label: str,
        error: BaseException,
        severity: AuditSeverity | str = AuditSeverity.ERROR,
        user_id: str | None = None,
    ) -> AuditEvent | None:
        """Record an error.

        Args:
            label: Where the error was reported from; error statistics
                rank on this.
            error: The exception. File, line and trace are taken from its
                traceback when it was raised.
            severity: Event severity (default error).
            user_id: Acting user, if any.

        Raises:
            ValueError: If severity is not a valid AuditSeverity.
        """
        severity = AuditSeverity(severity)
        file, line = _raise_site(error)
        trace = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
        context = ErrorContext(
            label=label,
            error_message=str(error),
            error_type=type(error).__name__,
            file=file,
            line=line,
            trace=truncate_trace(trace),
            timestamp=_now_iso(),
        )
        return await self._record(
            event_type=AuditEventType.ERROR,
            context=context.to_dict(),
            severity=severity,
            user_id=user_id,
        )

    async def record_user_action(
        self,
        *,
        user_id: str | None,
        action: str,
        metadata: dict[str, Any] | None = None,
    ) -> AuditEvent | None:
        """Record a user action (severity info).

        Metadata is copied into plain JSON types (see ``json_safe``).
        """
        context = UserActionContext(
            action=action,
            metadata=json_safe(dict(metadata or {})),
            timestamp=_now_iso(),
        )
        return await self._record(
            event_type=AuditEventType.USER_ACTION,
            context=context.to_dict(),
            severity=AuditSeverity.INFO,
            user_id=user_id,
        )

    async def query_trail(
        self,
        *,
        user_id: str | None = None,
        event_type: AuditEventType | str | None = None,
        severity: AuditSeverity | str | None = None,
        within_days: int = 30,
        limit: int = 100,
    ) -> Result[list[AuditEvent], AuditError]:
        """Events from the last ``within_days`` days matching all filters.

        Newest first, at most ``limit`` rows (capped by settings).

        Raises:
            ValueError: On invalid event_type, severity or non-positive
                within_days.
        """
        if within_days <= 0:
            raise ValueError(f"within_days must be > 0, got {within_days}")
        type_filter = AuditEventType(event_type) if event_type is not None else None
        severity_filter = AuditSeverity(severity) if severity is not None else None

        return await self._store.query(
            user_id=user_id,
            event_type=type_filter,
            severity=severity_filter,
            since=datetime.now(UTC) - timedelta(days=within_days),
            limit=min(limit, settings.audit_query_max_limit),
        )

    async def _record(
        self,
        *,
        event_type: AuditEventType,
        context: dict[str, Any],
        severity: AuditSeverity,
        user_id: str | None,
    ) -> AuditEvent | None:
        request = self._request_context()
        event = AuditEvent.create(
            event_type=event_type,
            context=context,
            severity=severity,
            user_id=user_id,
            ip_address=request.ip_address,
            user_agent=request.user_agent,
        )

        match await self._store.append(event):
            case Success(value=stored):
                self._logger.debug(
                    "audit_event_recorded",
                    event_id=str(stored.id),
                    event_type=event_type.value,
                )
                return stored
            case Failure(error=error):
                self._logger.error(
                    "audit_record_failed",
                    event_type=event_type.value,
                    severity=severity.value,
                    user_id=user_id,
                    error_code=error.code.value,
                    error_message=error.message,
                )
                return None


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()
