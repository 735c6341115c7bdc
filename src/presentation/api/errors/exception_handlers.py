"""Exception handlers for the FastAPI application.

Exports:
    rate_limit_exceeded_handler: Renders RateLimitExceededError as HTTP 429
    register_error_handlers: Register all handlers with a FastAPI app
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.application.errors import RateLimitExceededError


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceededError
) -> JSONResponse:
    """Render a rate limit denial.

    Body:
        {"success": false, "message": ..., "retry_after": N,
         "error": "rate_limit_exceeded"}

    Headers:
        Retry-After always; X-RateLimit-Limit and X-RateLimit-Remaining when
        a counter window applied.
    """
    headers = {"Retry-After": str(exc.retry_after)}
    if exc.limit is not None:
        headers["X-RateLimit-Limit"] = str(exc.limit)
        headers["X-RateLimit-Remaining"] = "0"

    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=exc.to_dict(),
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the application.

    Example:
        >>> app = FastAPI()
        >>> register_error_handlers(app)
    """
    app.add_exception_handler(
        RateLimitExceededError,
        rate_limit_exceeded_handler,  # type: ignore[arg-type]
    )
