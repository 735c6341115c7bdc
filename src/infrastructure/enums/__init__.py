"""Infrastructure enums.

Usage:
    from src.infrastructure.enums import InfrastructureErrorCode

    CacheError(
        code=ErrorCode.CACHE_UNAVAILABLE,
        infrastructure_code=InfrastructureErrorCode.CACHE_CONNECTION_ERROR,
        message="Cache ping failed",
    )
"""

from src.infrastructure.enums.infrastructure_error_code import (
    InfrastructureErrorCode,
)

__all__ = ["InfrastructureErrorCode"]
