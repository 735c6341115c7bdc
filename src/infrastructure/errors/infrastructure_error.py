"""Infrastructure layer error types.

Infrastructure errors represent failures in the shared key-value store.

Architecture:
- Infrastructure catches exceptions and maps them to DomainError subclasses
- Infrastructure errors inherit from DomainError (not Exception)
- InfrastructureErrorCode records which backend operation failed
- Used with Result types for error propagation
"""

from dataclasses import dataclass

from src.core.errors import DomainError
from src.infrastructure.enums import InfrastructureErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class InfrastructureError(DomainError):
    """Base infrastructure error.

    Attributes:
        code: Domain ErrorCode seen by callers.
        message: Human-readable message.
        infrastructure_code: Backend operation that failed.
        details: Additional context.
    """

    infrastructure_code: InfrastructureErrorCode | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CacheError(InfrastructureError):
    """Wraps Redis exceptions raised by the lock store.

    Attributes:
        details: Key, operation and original error text.
    """

    pass
