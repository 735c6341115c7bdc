"""Result types for explicit success/failure outcomes.

Store-facing operations (cache, audit store) never raise into the services
that call them. They return a ``Success`` or a ``Failure`` and callers branch
on the outcome with structural pattern matching. That is how the rate
limiter decides to fail open and how the statistics service surfaces read
failures.

Usage:
    result = await cache.set_if_absent("rate_limit:user:42:login", "1", ttl=60)
    match result:
        case Success(value=True):
            ...  # marker acquired
        case Success(value=False):
            ...  # marker already present
        case Failure(error=err):
            logger.error("Store unavailable", error_code=err.code.value)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful outcome.

    Attributes:
        value: The value produced by the operation.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed outcome.

    Attributes:
        error: Error describing why the operation failed.
    """

    error: E


type Result[T, E] = Success[T] | Failure[E]
