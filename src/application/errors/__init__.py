"""Application layer errors.

Exports:
    RateLimitExceededError: Raised when a caller is denied by a rate limit
"""

from src.application.errors.rate_limit_exceeded import RateLimitExceededError

__all__ = [
    "RateLimitExceededError",
]
