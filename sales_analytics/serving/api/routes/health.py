"""
Health Check Endpoints

Provides health and liveness checks for orchestration systems.
"""

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from sales_analytics.analytics.errors import StoreFailureError
from sales_analytics.analytics.filters import RecordFilter
from sales_analytics.analytics.service import SalesAnalyticsService
from sales_analytics.config import get_settings
from sales_analytics.serving.api.dependencies import get_analytics_service

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


@router.get("/health", response_model=HealthResponse)
async def health_check(
    response: Response,
    service: SalesAnalyticsService = Depends(get_analytics_service),
) -> HealthResponse:
    """
    Report whether the record store answers queries.

    Returns 503 when the store is unreachable.
    """
    settings = get_settings()
    checks: Dict[str, Any] = {}
    overall_status = "healthy"

    try:
        start = time.perf_counter()
        records = await service.store.count(RecordFilter())
        checks["store"] = {
            "status": "healthy",
            "backend": settings.analytics.store_backend,
            "records": records,
            "latency_ms": round((time.perf_counter() - start) * 1000, 2),
        }
    except StoreFailureError as e:
        checks["store"] = {"status": "unhealthy", "error": str(e)}
        overall_status = "unhealthy"
        response.status_code = 503

    return HealthResponse(
        status=overall_status,
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    """
    Liveness probe endpoint.

    Returns 200 if the application is running.
    """
    return {"status": "alive"}
