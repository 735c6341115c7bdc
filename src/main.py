"""
Main FastAPI application entry point.

Wires the request context middleware, the 429 error handler and the v1
usage routes. Rate limited endpoints attach ``rate_limit_gate`` or
``throttle`` from src.application.dependencies.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.container import get_cache, get_database
from src.core.result import Success
from src.presentation.api.errors import register_error_handlers
from src.presentation.api.middleware import RequestContextMiddleware
from src.presentation.api.v1 import v1_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan.

    Startup creates the audit schema if it is missing. Shutdown disposes of
    the database pool.
    """
    database = get_database()
    await database.create_all()
    yield
    await database.close()


def create_app() -> FastAPI:
    """Build the application instance."""
    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Wire request context middleware (audit provenance)
    application.add_middleware(RequestContextMiddleware)

    # Register exception handlers (429 responses)
    register_error_handlers(application)

    application.include_router(v1_router)
    application.add_api_route("/health", health, methods=["GET"])
    return application


async def health() -> JSONResponse:
    """Health check for monitoring and load balancers.

    Redis being down is reported but does not fail the check: the rate
    limiter fails open.
    """
    cache_ok = isinstance(await get_cache().ping(), Success)
    database_ok = await get_database().check_connection()
    return JSONResponse(
        status_code=200 if database_ok else 503,
        content={
            "status": "healthy" if database_ok else "unhealthy",
            "cache": "ok" if cache_ok else "unavailable",
            "database": "ok" if database_ok else "unavailable",
        },
    )


app = create_app()
