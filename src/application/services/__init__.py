"""Application services.

- UsageRecorder: records usage events to the audit store
- AuditStatisticsService: aggregates the audit trail into statistics
"""

from src.application.services.audit_statistics import AuditStatisticsService
from src.application.services.usage_recorder import UsageRecorder

__all__ = ["AuditStatisticsService", "UsageRecorder"]
