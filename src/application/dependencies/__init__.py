"""Application layer dependencies.

FastAPI dependencies for cross-cutting concerns like rate limiting.
These are injected via Depends() in presentation layer endpoints.

Usage:
    from src.application.dependencies import throttle

    @router.get("/market/overview")
    async def overview(_: None = Depends(throttle("market.overview"))):
        ...
"""

from src.application.dependencies.rate_limit import (
    get_client_ip,
    rate_limit_gate,
    throttle,
)

__all__ = [
    "get_client_ip",
    "rate_limit_gate",
    "throttle",
]
