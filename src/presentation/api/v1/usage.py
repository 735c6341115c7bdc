"""Usage statistics and audit trail endpoints (read-only).

Routes:
    GET /api/v1/usage/errors        ErrorStats for a trailing window
    GET /api/v1/usage/llm           LLMUsageStats for a trailing window
    GET /api/v1/usage/rate-limits   RateLimitStats for a trailing window
    GET /api/v1/usage/trail         Filtered audit events, newest first
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.application.services.audit_statistics import AuditStatisticsService
from src.application.services.usage_recorder import UsageRecorder
from src.core.container import get_audit_statistics, get_usage_recorder
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditEventType, AuditSeverity
from src.domain.errors import AuditError

usage_router = APIRouter(prefix="/usage", tags=["Usage"])

WithinDays = Annotated[int, Query(gt=0, le=365)]


def _unwrap(result: Result[Any, AuditError]) -> Any:
    match result:
        case Success(value=value):
            return value
        case Failure(error=error):
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=error.message,
            )


@usage_router.get("/errors")
async def error_stats(
    statistics: Annotated[AuditStatisticsService, Depends(get_audit_statistics)],
    within_days: WithinDays = 7,
) -> dict[str, Any]:
    return _unwrap(await statistics.error_stats(within_days)).to_dict()


@usage_router.get("/llm")
async def llm_usage_stats(
    statistics: Annotated[AuditStatisticsService, Depends(get_audit_statistics)],
    within_days: WithinDays = 7,
) -> dict[str, Any]:
    return _unwrap(await statistics.llm_usage_stats(within_days)).to_dict()


@usage_router.get("/rate-limits")
async def rate_limit_stats(
    statistics: Annotated[AuditStatisticsService, Depends(get_audit_statistics)],
    within_days: WithinDays = 7,
) -> dict[str, Any]:
    return _unwrap(await statistics.rate_limit_stats(within_days)).to_dict()


@usage_router.get("/trail")
async def audit_trail(
    recorder: Annotated[UsageRecorder, Depends(get_usage_recorder)],
    user_id: str | None = None,
    event_type: AuditEventType | None = None,
    severity: AuditSeverity | None = None,
    within_days: Annotated[int, Query(gt=0, le=365)] = 30,
    limit: Annotated[int, Query(gt=0, le=1000)] = 100,
) -> list[dict[str, Any]]:
    """Audit events matching all filters, newest first."""
    events = _unwrap(
        await recorder.query_trail(
            user_id=user_id,
            event_type=event_type,
            severity=severity,
            within_days=within_days,
            limit=limit,
        )
    )
    return [
        {
            "id": str(event.id),
            "event_type": event.event_type.value,
            "severity": event.severity.value,
            "user_id": event.user_id,
            "context": event.context,
            "ip_address": event.ip_address,
            "user_agent": event.user_agent,
            "created_at": event.created_at.isoformat(),
        }
        for event in events
    ]
