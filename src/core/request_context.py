"""Ambient request context (caller IP and user agent).

The usage recorder stamps provenance on every event it writes, but callers
never pass it explicitly. The request context middleware stores it in a
ContextVar for the lifetime of a request and this module exposes it.

Outside a request (background jobs, tests) the context is empty and the
provenance fields are stored as None.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class RequestContext:
    """Provenance of the current request.

    Attributes:
        ip_address: Client IP address, if known.
        user_agent: Client User-Agent header, if sent.
    """

    ip_address: str | None = None
    user_agent: str | None = None


EMPTY_REQUEST_CONTEXT = RequestContext()

request_context_var: ContextVar[RequestContext] = ContextVar(
    "request_context", default=EMPTY_REQUEST_CONTEXT
)


def get_request_context() -> RequestContext:
    """Return the current request context.

    Returns:
        RequestContext: Current provenance, or an empty context when called
        outside of a request.
    """
    return request_context_var.get()


def set_request_context(context: RequestContext) -> Token[RequestContext]:
    """Install ``context`` for the current task.

    Returns:
        Token usable with ``reset_request_context`` to restore the previous value.
    """
    return request_context_var.set(context)


def reset_request_context(token: Token[RequestContext]) -> None:
    """Restore the context that was active before ``set_request_context``."""
    request_context_var.reset(token)
