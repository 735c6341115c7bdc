"""Domain entities.

Pure business logic entities with no framework dependencies.
"""

from src.domain.entities.audit_event import AuditEvent

__all__ = [
    "AuditEvent",
]
