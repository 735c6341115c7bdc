"""Audit severity enumeration."""

from enum import Enum


class AuditSeverity(str, Enum):
    """Severity attached to every audit event (default INFO)."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def is_error(self) -> bool:
        """True for ERROR and CRITICAL."""
        return self in (AuditSeverity.ERROR, AuditSeverity.CRITICAL)

    @property
    def is_critical(self) -> bool:
        """True for CRITICAL only."""
        return self is AuditSeverity.CRITICAL
