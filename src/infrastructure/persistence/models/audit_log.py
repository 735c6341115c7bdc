"""Audit log database model.

Stores AuditEvents: LLM requests, rate limit violations, errors and user
actions. The table is append-only; no code path updates or deletes rows.
"""

from typing import Any

from sqlalchemy import JSON, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel


class AuditLogModel(BaseModel):
    """Audit log row (immutable).

    Fields:
        id: UUID primary key (from BaseModel, copied from the entity)
        created_at: When the event was recorded (from BaseModel)
        event_type: llm_request | rate_limit | error | user_action
        user_id: Acting principal (None for system or anonymous events)
        context: Event-specific JSON object
        severity: info | warning | error | critical
        ip_address: Client IP (IPv6 max length 45)
        user_agent: Client user agent

    Indexes:
        - idx_audit_user_created: (user_id, created_at) for per-user trails
        - idx_audit_event_severity_created: (event_type, severity, created_at)
          for statistics windows
        - created_at: indexed via BaseModel for time-range queries
    """

    __tablename__ = "audit_logs"

    event_type: Mapped[str] = mapped_column(String(32), nullable=False)

    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    context: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    severity: Mapped[str] = mapped_column(
        String(16), nullable=False, default="info"
    )

    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)

    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("idx_audit_user_created", "user_id", "created_at"),
        Index(
            "idx_audit_event_severity_created", "event_type", "severity", "created_at"
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<AuditLogModel("
            f"id={self.id}, "
            f"event_type={self.event_type!r}, "
            f"severity={self.severity!r}, "
            f"user_id={self.user_id!r}, "
            f"created_at={self.created_at}"
            f")>"
        )
