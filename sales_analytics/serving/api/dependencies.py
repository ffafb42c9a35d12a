"""
API Dependencies
"""

from fastapi import Request

from sales_analytics.analytics.service import SalesAnalyticsService


def get_analytics_service(request: Request) -> SalesAnalyticsService:
    """
    FastAPI dependency returning the service built at startup.

    Example:
        @router.get("/statistics")
        async def statistics(service: SalesAnalyticsService = Depends(get_analytics_service)):
            ...
    """
    service = getattr(request.app.state, "analytics_service", None)
    if service is None:
        raise RuntimeError("Analytics service not initialized. Is the application lifespan running?")
    return service
