"""Request context middleware.

Captures caller provenance (client IP and user agent) for each request and
exposes it through src.core.request_context, so audit events recorded
anywhere during the request are stamped without threading it through calls.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.application.dependencies.rate_limit import get_client_ip
from src.core.request_context import (
    RequestContext,
    reset_request_context,
    set_request_context,
)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that installs a RequestContext per request."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        ip_address = get_client_ip(request)
        token = set_request_context(
            RequestContext(
                ip_address=None if ip_address == "unknown" else ip_address,
                user_agent=request.headers.get("User-Agent"),
            )
        )
        try:
            return await call_next(request)
        finally:
            # Clear context after request to prevent leakage
            reset_request_context(token)
