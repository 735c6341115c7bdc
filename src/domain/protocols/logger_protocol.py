"""LoggerProtocol definition for structured logging.

Every component that logs (rate limiter, usage recorder, statistics) takes a
logger satisfying this protocol. Logs are structured: a short constant
message plus key-value context.

Log Levels:
    - DEBUG: Diagnostic detail (dev only)
    - INFO: Normal operational events
    - WARNING: Degraded service (store unavailable, fail-open path taken)
    - ERROR: Operation failed, caller continues
    - CRITICAL: System-wide failure

Usage:
    from src.core.container import get_logger

    logger = get_logger()
    logger.warning("rate_limit_attempt_failed", key=key, error_code=code)

    scoped = logger.bind(component="usage_recorder")
    scoped.info("audit_event_recorded", event_id=str(event.id))
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    Implementations may enrich logs with timestamp and level.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Constant event name or short sentence.
            error: Optional exception; implementations add error_type and
                error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message for system-wide failures."""
        ...

    def bind(self, **context: Any) -> "LoggerProtocol":
        """Return new logger with permanently bound context.

        The original logger is unchanged.
        """
        ...

    def with_context(self, **context: Any) -> "LoggerProtocol":
        """Alias for bind()."""
        ...
