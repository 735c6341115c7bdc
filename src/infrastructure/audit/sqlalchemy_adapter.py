"""SQLAlchemy implementation of AuditProtocol.

Stores AuditEvents in the ``audit_logs`` table through an AsyncSession.
Works on any backend SQLAlchemy supports (PostgreSQL in production,
SQLite via aiosqlite in tests).

Following hexagonal architecture:
- Infrastructure implements domain protocol (AuditProtocol)
- Domain doesn't know about SQLAlchemy
- Adapter maps AuditLogModel rows to AuditEvent entities

Immutability:
    Only INSERT and SELECT are issued. There is no update or delete path.

Usage:
    adapter = SQLAlchemyAuditAdapter(session)

    result = await adapter.append(event)
    result = await adapter.query(user_id="42", limit=50)
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.entities.audit_event import AuditEvent
from src.domain.enums import AuditEventType, AuditSeverity
from src.domain.errors import AuditError
from src.infrastructure.persistence.models.audit_log import AuditLogModel

MAX_QUERY_LIMIT = 1000


def _as_utc(value: datetime) -> datetime:
    """Normalize to aware UTC. SQLite returns naive datetimes stored as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _to_model(event: AuditEvent) -> AuditLogModel:
    return AuditLogModel(
        id=event.id,
        event_type=event.event_type.value,
        user_id=event.user_id,
        context=event.context,
        severity=event.severity.value,
        ip_address=event.ip_address,
        user_agent=event.user_agent,
        created_at=_as_utc(event.created_at),
    )


def _to_entity(row: AuditLogModel) -> AuditEvent:
    return AuditEvent(
        id=row.id,
        event_type=AuditEventType(row.event_type),
        context=row.context or {},
        severity=AuditSeverity(row.severity),
        user_id=row.user_id,
        ip_address=row.ip_address,
        user_agent=row.user_agent,
        created_at=_as_utc(row.created_at),
    )


def _window(
    statement: Select[Any],
    since: datetime | None,
    event_type: AuditEventType | None,
) -> Select[Any]:
    if since is not None:
        statement = statement.where(AuditLogModel.created_at >= _as_utc(since))
    if event_type is not None:
        statement = statement.where(
            AuditLogModel.event_type == AuditEventType(event_type).value
        )
    return statement


class SQLAlchemyAuditAdapter:
    """SQLAlchemy implementation of AuditProtocol.

    Stateless: all state lives in the database. The session lifecycle is
    managed by the container (one session per request).

    Attributes:
        session: SQLAlchemy async session for database operations.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize adapter with database session.

        Args:
            session: SQLAlchemy async session (injected by container).
        """
        self.session = session

    async def append(self, event: AuditEvent) -> Result[AuditEvent, AuditError]:
        """Insert one event and commit immediately.

        Returns:
            Success(event) once committed, Failure(AuditError) otherwise.
        """
        try:
            self.session.add(_to_model(event))
            await self.session.commit()  # Commit immediately for durability
            return Success(value=event)
        except SQLAlchemyError as e:
            await self.session.rollback()
            return Failure(
                error=AuditError(
                    code=ErrorCode.AUDIT_RECORD_FAILED,
                    message=f"Failed to record audit event: {e}",
                    details={
                        "event_id": str(event.id),
                        "event_type": event.event_type.value,
                        "error_type": type(e).__name__,
                    },
                )
            )

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
        """Query events matching all filters, newest first.

        Limit is capped at 1000.
        """
        limit = max(min(limit, MAX_QUERY_LIMIT), 0)
        statement = _window(select(AuditLogModel), since, event_type)
        if user_id is not None:
            statement = statement.where(AuditLogModel.user_id == user_id)
        if severity is not None:
            statement = statement.where(
                AuditLogModel.severity == AuditSeverity(severity).value
            )
        statement = (
            statement.order_by(AuditLogModel.created_at.desc(), AuditLogModel.id.desc())
            .limit(limit)
            .offset(offset)
        )

        try:
            result = await self.session.execute(statement)
            return Success(value=[_to_entity(row) for row in result.scalars().all()])
        except SQLAlchemyError as e:
            return self._query_failure("query", e)

    async def fetch_window(
        self,
        *,
        since: datetime,
        event_type: AuditEventType | None = None,
    ) -> Result[list[AuditEvent], AuditError]:
        """Every event at or after ``since``, oldest first. Uncapped."""
        statement = _window(select(AuditLogModel), since, event_type).order_by(
            AuditLogModel.created_at.asc(), AuditLogModel.id.asc()
        )

        try:
            result = await self.session.execute(statement)
            return Success(value=[_to_entity(row) for row in result.scalars().all()])
        except SQLAlchemyError as e:
            return self._query_failure("fetch_window", e)

    async def count(
        self,
        *,
        since: datetime,
        event_type: AuditEventType | None = None,
    ) -> Result[int, AuditError]:
        """Count events at or after ``since``."""
        statement = _window(
            select(func.count()).select_from(AuditLogModel), since, event_type
        )

        try:
            result = await self.session.execute(statement)
            return Success(value=int(result.scalar_one()))
        except SQLAlchemyError as e:
            return self._query_failure("count", e)

    @staticmethod
    def _query_failure(operation: str, error: Exception) -> Failure[AuditError]:
        return Failure(
            error=AuditError(
                code=ErrorCode.AUDIT_QUERY_FAILED,
                message=f"Failed to query audit events: {error}",
                details={"operation": operation, "error_type": type(error).__name__},
            )
        )
