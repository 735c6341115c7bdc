"""Rate limit exceeded exception.

Raised by the rate limit dependencies when a caller is denied. The
presentation layer renders it as HTTP 429 (see register_error_handlers).

Unlike store failures, which travel as Result values, a denial ends the
request, so it is an exception.
"""


class RateLimitExceededError(Exception):
    """Caller exceeded a rate limit.

    Args:
        retry_after: Seconds until the caller may retry (clamped at 0).
        message: Client-facing message. Defaults to
            "Rate limit exceeded. Retry after N seconds."
        limit: Attempts allowed per window, when a counter window applied.
    """

    def __init__(
        self,
        retry_after: int,
        message: str | None = None,
        *,
        limit: int | None = None,
    ) -> None:
        self.retry_after = max(int(retry_after), 0)
        self.message = (
            message or f"Rate limit exceeded. Retry after {self.retry_after} seconds."
        )
        self.limit = limit
        super().__init__(self.message)

    def to_dict(self) -> dict[str, object]:
        """Response body."""
        return {
            "success": False,
            "message": self.message,
            "retry_after": self.retry_after,
            "error": "rate_limit_exceeded",
        }
