"""Rate limit FastAPI dependencies.

Two factories, one per limiter primitive:

- ``rate_limit_gate(action, ttl_seconds)``: one-shot gate. The first call
  per caller passes; later calls are denied until the lock expires. Use for
  expensive operations such as LLM analysis generation.
- ``throttle(endpoint_name)``: fixed window counter using the limits in
  ENDPOINT_LIMITS (falls back to the authenticated tier).

The caller is identified by ``request.state.user_id`` when authentication
has set it, otherwise by client IP. On denial the violation is recorded in
the audit trail and RateLimitExceededError is raised (rendered as 429).

Usage:
    from src.application.dependencies.rate_limit import rate_limit_gate, throttle

    @router.post("/analysis/{symbol}")
    async def generate_analysis(
        symbol: str,
        _: None = Depends(rate_limit_gate("analysis:generate", ttl_seconds=3600)),
    ):
        ...

    @router.get("/market/overview")
    async def market_overview(_: None = Depends(throttle("market.overview"))):
        ...
"""

from typing import Annotated, Any, Callable, Coroutine

from fastapi import Depends, Request

from src.application.errors import RateLimitExceededError
from src.application.services.usage_recorder import UsageRecorder
from src.core.container import get_rate_limiter, get_usage_recorder
from src.domain.protocols import RateLimitProtocol
from src.infrastructure.rate_limit.config import get_endpoint_limit


def rate_limit_gate(
    action: str,
    *,
    ttl_seconds: int = 60,
) -> Callable[..., Coroutine[Any, Any, None]]:
    """Create a one-shot gate dependency for ``action``.

    Args:
        action: Action name, first part of the limiter key.
        ttl_seconds: Lock duration.

    Returns:
        FastAPI dependency raising RateLimitExceededError when denied.
    """
    if ttl_seconds <= 0:
        raise ValueError(f"ttl_seconds must be > 0, got {ttl_seconds}")

    async def dependency(
        request: Request,
        rate_limiter: Annotated[RateLimitProtocol, Depends(get_rate_limiter)],
        recorder: Annotated[UsageRecorder, Depends(get_usage_recorder)],
    ) -> None:
        user_id = _get_user_id(request)
        key = f"{action}:{_identifier(request, user_id)}"

        decision = await rate_limiter.attempt(key, ttl_seconds)
        if decision.is_denied:
            await recorder.record_rate_limit_violation(
                user_id=user_id,
                endpoint=request.url.path,
                retry_after_seconds=decision.retry_after_seconds,
            )
            raise RateLimitExceededError(retry_after=decision.retry_after_seconds)

    return dependency


def throttle(endpoint_name: str) -> Callable[..., Coroutine[Any, Any, None]]:
    """Create a fixed window counter dependency for ``endpoint_name``.

    Args:
        endpoint_name: Key into ENDPOINT_LIMITS (e.g. "sentiment.news").

    Returns:
        FastAPI dependency raising RateLimitExceededError when the window's
        attempts are used up.
    """
    limit = get_endpoint_limit(endpoint_name)

    async def dependency(
        request: Request,
        rate_limiter: Annotated[RateLimitProtocol, Depends(get_rate_limiter)],
        recorder: Annotated[UsageRecorder, Depends(get_usage_recorder)],
    ) -> None:
        user_id = _get_user_id(request)
        key = f"{endpoint_name}|{_identifier(request, user_id)}"

        if await rate_limiter.too_many_attempts(
            key, limit.max_attempts, limit.window_seconds
        ):
            retry_after = await rate_limiter.remaining_time(key)
            await recorder.record_rate_limit_violation(
                user_id=user_id,
                endpoint=request.url.path,
                retry_after_seconds=retry_after,
            )
            raise RateLimitExceededError(
                retry_after=retry_after, limit=limit.max_attempts
            )

    return dependency


def _get_user_id(request: Request) -> str | None:
    """User id set on request state by authentication, if any."""
    user_id = getattr(request.state, "user_id", None)
    return str(user_id) if user_id is not None else None


def _identifier(request: Request, user_id: str | None) -> str:
    if user_id is not None:
        return f"user:{user_id}"
    return f"ip:{get_client_ip(request)}"


def get_client_ip(request: Request) -> str:
    """Extract client IP from request.

    Checks X-Forwarded-For (first hop), then X-Real-IP, then the socket peer.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    if request.client:
        return request.client.host

    return "unknown"
