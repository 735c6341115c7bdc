"""Audit trail protocol (port) for usage records.

Defines the contract for the persistent, append-only store of AuditEvents.
Infrastructure provides the adapter (SQLAlchemyAuditAdapter); the usage
recorder and statistics service depend only on this protocol.

Usage:
    from src.domain.protocols import AuditProtocol

    audit: AuditProtocol = Depends(get_audit_store)

    result = await audit.append(event)
    match result:
        case Success(value=stored):
            ...
        case Failure(error=error):
            ...
"""

from datetime import datetime
from typing import Protocol

from src.core.result import Result
from src.domain.entities.audit_event import AuditEvent
from src.domain.enums import AuditEventType, AuditSeverity
from src.domain.errors import AuditError


class AuditProtocol(Protocol):
    """Protocol for audit event stores.

    Records are immutable once written: the protocol has no update or delete.

    Error Handling:
        All methods return Result types. NEVER raise for store failures,
        wrap them in Failure(AuditError(...)) instead.
    """

    async def append(self, event: AuditEvent) -> Result[AuditEvent, AuditError]:
        """Durably append one event.

        Returns:
            Success(event) once stored, Failure(AuditError) otherwise.
        """
        ...

    async def query(
        self,
        *,
        user_id: str | None = None,
        event_type: AuditEventType | None = None,
        severity: AuditSeverity | None = None,
        since: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Result[list[AuditEvent], AuditError]:
        """Query events, newest first.

        All filters combine with AND. ``since`` is inclusive.

        Args:
            user_id: Filter by user.
            event_type: Filter by event type.
            severity: Filter by severity.
            since: Only events created at or after this instant.
            limit: Maximum rows (capped at 1000).
            offset: Rows to skip (pagination).
        """
        ...

    async def fetch_window(
        self,
        *,
        since: datetime,
        event_type: AuditEventType | None = None,
    ) -> Result[list[AuditEvent], AuditError]:
        """Fetch every event created at or after ``since``, oldest first.

        Not capped. Used by aggregation, where chronological order matters
        for tie-breaking.
        """
        ...

    async def count(
        self,
        *,
        since: datetime,
        event_type: AuditEventType | None = None,
    ) -> Result[int, AuditError]:
        """Count events created at or after ``since``."""
        ...
