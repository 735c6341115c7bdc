"""Typed context payloads for audit events.

Each event type has its own context shape. The context is stored as a JSON
object alongside the event; these value objects are the typed view of it.
They form a tagged union keyed by ``AuditEventType``. Only
``UserActionContext.metadata`` is free-form.

Usage:
    from src.domain.value_objects.audit_context import RateLimitContext, parse_context

    context = RateLimitContext(
        endpoint="/api/v1/analysis/generate",
        retry_after=42,
        attempted_at="2026-01-01T00:00:00+00:00",
        ip_address="203.0.113.7",
    )
    event = AuditEvent.create(
        event_type=context.event_type,
        context=context.to_dict(),
        severity=AuditSeverity.WARNING,
    )

    parse_context(event.event_type, event.context)  # -> RateLimitContext
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, ClassVar, Mapping, Self

from src.domain.enums import AuditEventType


class _ContextMixin:
    """Shared (de)serialization for context variants."""

    __slots__ = ()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON object stored with the event."""
        return asdict(self)  # type: ignore[call-overload]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Build from a stored JSON object, ignoring unknown keys.

        Raises:
            TypeError: If a required field is missing.
        """
        known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True, slots=True, kw_only=True)
class LLMRequestContext(_ContextMixin):
    """Context of an ``llm_request`` event.

    Payload sizes are byte-length proxies; the raw prompt and response are
    never stored.
    """

    event_type: ClassVar[AuditEventType] = AuditEventType.LLM_REQUEST

    symbol: str
    prompt_length: int = 0
    response_length: int = 0
    duration_seconds: float = 0.0
    cost_usd: float = 0.0
    model: str | None = None
    timestamp: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitContext(_ContextMixin):
    """Context of a ``rate_limit`` event."""

    event_type: ClassVar[AuditEventType] = AuditEventType.RATE_LIMIT

    endpoint: str
    retry_after: int = 0
    attempted_at: str | None = None
    ip_address: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ErrorContext(_ContextMixin):
    """Context of an ``error`` event.

    ``label`` is the human-readable place the error was reported from and
    is what error statistics rank on.
    """

    event_type: ClassVar[AuditEventType] = AuditEventType.ERROR

    label: str
    error_message: str = ""
    error_type: str = ""
    file: str | None = None
    line: int | None = None
    trace: str = ""
    timestamp: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UserActionContext(_ContextMixin):
    """Context of a ``user_action`` event."""

    event_type: ClassVar[AuditEventType] = AuditEventType.USER_ACTION

    action: str
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: str | None = None


type AuditContext = LLMRequestContext | RateLimitContext | ErrorContext | UserActionContext

_CONTEXT_TYPES: dict[AuditEventType, type[_ContextMixin]] = {
    AuditEventType.LLM_REQUEST: LLMRequestContext,
    AuditEventType.RATE_LIMIT: RateLimitContext,
    AuditEventType.ERROR: ErrorContext,
    AuditEventType.USER_ACTION: UserActionContext,
}


def parse_context(
    event_type: AuditEventType | str, data: Mapping[str, Any]
) -> AuditContext:
    """Return the typed view of a stored context.

    Args:
        event_type: Tag selecting the variant.
        data: Stored JSON object.

    Raises:
        ValueError: If ``event_type`` is not a known event type.
        TypeError: If a required field is missing from ``data``.
    """
    context_cls = _CONTEXT_TYPES[AuditEventType(event_type)]
    return context_cls.from_dict(data)  # type: ignore[return-value]
