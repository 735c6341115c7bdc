"""Infrastructure-specific error codes.

Internal codes for tracking which backend operation failed. Callers see the
domain ErrorCode; these travel alongside it in InfrastructureError.

Categories:
- Cache errors (CACHE_*)
"""

from enum import Enum


class InfrastructureErrorCode(Enum):
    """Infrastructure-specific error codes."""

    # Cache errors
    CACHE_CONNECTION_ERROR = "cache_connection_error"
    CACHE_GET_ERROR = "cache_get_error"
    CACHE_SET_ERROR = "cache_set_error"
    CACHE_DELETE_ERROR = "cache_delete_error"
    CACHE_UNKNOWN_ERROR = "cache_unknown_error"
