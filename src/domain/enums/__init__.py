"""Domain enums.

All domain enums live in src/domain/enums/ for discoverability.

Available Enums:
    - AuditEventType: Closed set of recorded event kinds
    - AuditSeverity: Severity levels for audit events
"""

from src.domain.enums.audit_event_type import AuditEventType
from src.domain.enums.audit_severity import AuditSeverity

__all__ = [
    "AuditEventType",
    "AuditSeverity",
]
