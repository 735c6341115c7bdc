"""Rate limit decision value objects.

Usage:
    from src.domain.value_objects.rate_limit_decision import RateLimitDecision

    decision = await rate_limiter.attempt("user:42:login", ttl_seconds=60)
    if decision.is_denied:
        raise RateLimitExceededError(retry_after=decision.retry_after_seconds)
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitDecision:
    """Outcome of a single rate limiter check.

    Constructed fresh per call, never persisted.

    Attributes:
        allowed: Whether the action may proceed now.
        retry_after_seconds: Seconds until the caller may retry. Always 0
            when allowed.

    Raises:
        ValueError: If retry_after_seconds is negative, or non-zero on an
            allowed decision.
    """

    allowed: bool
    retry_after_seconds: int = 0

    def __post_init__(self) -> None:
        """Enforce decision invariants."""
        if self.retry_after_seconds < 0:
            raise ValueError(
                f"retry_after_seconds must be >= 0, got {self.retry_after_seconds}"
            )
        if self.allowed and self.retry_after_seconds != 0:
            raise ValueError("An allowed decision cannot carry a retry delay")

    @classmethod
    def allow(cls) -> "RateLimitDecision":
        """Decision permitting the action."""
        return cls(allowed=True, retry_after_seconds=0)

    @classmethod
    def deny(cls, retry_after_seconds: int) -> "RateLimitDecision":
        """Decision refusing the action.

        Args:
            retry_after_seconds: Remaining lock time. Negative store values
                (Redis reports -1/-2 for keys without TTL) are clamped to 0.
        """
        return cls(allowed=False, retry_after_seconds=max(int(retry_after_seconds), 0))

    @property
    def is_denied(self) -> bool:
        """Whether the action was refused."""
        return not self.allowed

    def to_dict(self) -> dict[str, bool | int]:
        """Serialize for response bodies and logs."""
        return {"allowed": self.allowed, "retry_after": self.retry_after_seconds}


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitInfo:
    """Snapshot of a gate marker, for support and debugging screens.

    Attributes:
        key: Full store key (prefix included).
        locked: Whether a marker currently exists.
        remaining_time: Seconds until the marker expires (0 when absent).
    """

    key: str
    locked: bool
    remaining_time: int

    def to_dict(self) -> dict[str, str | bool | int]:
        """Serialize for response bodies and logs."""
        return {
            "locked": self.locked,
            "remaining_time": self.remaining_time,
            "key": self.key,
        }
