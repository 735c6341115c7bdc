"""Domain-level error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.
Used with Result types so callers can branch on a failure without
parsing messages.

Categories:
- Validation errors (INVALID_*, VALIDATION_*)
- Rate limit errors (RATE_LIMIT_*)
- Audit trail errors (AUDIT_*)
- Cache errors (CACHE_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable).

    Error codes follow ENTITY_ACTION_REASON naming convention.
    """

    # Validation errors
    VALIDATION_FAILED = "validation_failed"
    INVALID_EVENT_TYPE = "invalid_event_type"
    INVALID_SEVERITY = "invalid_severity"
    INVALID_TIME_WINDOW = "invalid_time_window"

    # Rate limit errors
    RATE_LIMIT_CHECK_FAILED = "rate_limit_check_failed"
    RATE_LIMIT_RESET_FAILED = "rate_limit_reset_failed"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"

    # Audit trail errors
    AUDIT_RECORD_FAILED = "audit_record_failed"
    AUDIT_QUERY_FAILED = "audit_query_failed"

    # Cache errors
    CACHE_UNAVAILABLE = "cache_unavailable"
