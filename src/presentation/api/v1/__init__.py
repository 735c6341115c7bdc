"""API v1 routers."""

from fastapi import APIRouter

from src.presentation.api.v1.usage import usage_router

v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(usage_router)

__all__ = ["v1_router"]
