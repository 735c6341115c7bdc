"""Audit event type enumeration.

Closed set of event kinds the usage recorder writes. Values are validated
when an AuditEvent is built, so an unknown kind never reaches the store.

Usage:
    from src.domain.enums import AuditEventType

    AuditEventType("rate_limit")  # AuditEventType.RATE_LIMIT
    AuditEventType("login")       # ValueError
"""

from enum import Enum


class AuditEventType(str, Enum):
    """Kinds of recorded platform events.

    String Enum:
        Inherits from str so values serialize directly into JSON and the
        ``event_type`` column.
    """

    LLM_REQUEST = "llm_request"
    """A call to the language model backend (symbol, sizes, duration, cost)."""

    RATE_LIMIT = "rate_limit"
    """A caller was denied by the rate limiter."""

    ERROR = "error"
    """An exception reported by application code."""

    USER_ACTION = "user_action"
    """A significant action taken by a user (free-form metadata)."""
