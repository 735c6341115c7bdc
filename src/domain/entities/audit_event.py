"""AuditEvent domain entity.

Pure business logic, no framework dependencies.

An audit event is an append-only record of something significant that
happened on the platform: an LLM request, a rate limit violation, an error,
or a user action. Events are created once and never modified or deleted by
normal operation.
"""

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from uuid_extensions import uuid7

from src.domain.enums import AuditEventType, AuditSeverity
from src.domain.value_objects.audit_context import AuditContext, parse_context


@dataclass(frozen=True, slots=True, kw_only=True)
class AuditEvent:
    """Immutable audit event.

    Business Rules:
        - event_type and severity must be members of their enums
          (string values are coerced, unknown values raise ValueError)
        - context must survive a JSON round trip unchanged
        - the stored context is a private copy of the caller's mapping

    Attributes:
        id: Unique identifier (time-ordered UUIDv7).
        event_type: Kind of event.
        context: Event-specific JSON object (see audit_context).
        severity: Severity level (default INFO).
        user_id: Acting principal. None for system or anonymous events.
        ip_address: Client IP captured from the request context.
        user_agent: Client user agent captured from the request context.
        created_at: When the event was recorded (UTC).

    Example:
        >>> event = AuditEvent.create(
        ...     event_type=AuditEventType.USER_ACTION,
        ...     context={"action": "favorite_added", "metadata": {}},
        ...     user_id="42",
        ... )
        >>> event.severity
        <AuditSeverity.INFO: 'info'>
    """

    id: UUID
    event_type: AuditEventType
    context: dict[str, Any] = field(default_factory=dict)
    severity: AuditSeverity = AuditSeverity.INFO
    user_id: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate enums and copy the context through JSON.

        Raises:
            ValueError: If event_type or severity is not a valid member,
                or the context does not serialize losslessly to JSON.
        """
        object.__setattr__(self, "event_type", AuditEventType(self.event_type))
        object.__setattr__(self, "severity", AuditSeverity(self.severity))

        try:
            copied = json.loads(json.dumps(self.context, allow_nan=False))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Audit context is not JSON-serializable: {e}") from e
        if copied != self.context:
            raise ValueError("Audit context does not round-trip through JSON losslessly")
        object.__setattr__(self, "context", copied)

    @classmethod
    def create(
        cls,
        *,
        event_type: AuditEventType | str,
        context: dict[str, Any] | None = None,
        severity: AuditSeverity | str = AuditSeverity.INFO,
        user_id: str | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> "AuditEvent":
        """Build a new event with a fresh id and creation timestamp."""
        return cls(
            id=uuid7(),
            event_type=event_type,  # type: ignore[arg-type]
            context=context or {},
            severity=severity,  # type: ignore[arg-type]
            user_id=user_id,
            ip_address=ip_address,
            user_agent=user_agent,
            created_at=datetime.now(UTC),
        )

    def is_error(self) -> bool:
        """Whether severity is ERROR or CRITICAL."""
        return self.severity.is_error

    def is_critical(self) -> bool:
        """Whether severity is CRITICAL."""
        return self.severity.is_critical

    def typed_context(self) -> AuditContext:
        """Return the context parsed into its event-type specific variant."""
        return parse_context(self.event_type, self.context)
