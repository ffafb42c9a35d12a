"""
Sales Analytics Endpoints

Transaction listing and the dashboard charts: statistics, price-range bar
chart, category pie chart and the combined monthly view.
"""

from typing import List, Optional, Union

import structlog
from fastapi import APIRouter, Depends, Query

from sales_analytics.analytics.schemas import (
    CategoryCount,
    CombinedResult,
    HistogramBin,
    ListingPage,
    ListingQuery,
    PeriodStats,
    StatsResult,
)
from sales_analytics.analytics.service import SalesAnalyticsService
from sales_analytics.serving.api.dependencies import get_analytics_service

router = APIRouter()
logger = structlog.get_logger(__name__)

MONTH_DESCRIPTION = "English month name, any case (e.g. March)"


@router.get("/transactions", response_model=ListingPage)
async def list_transactions(
    month: Optional[str] = Query(None, description=MONTH_DESCRIPTION),
    search: Optional[str] = Query(None, description="Text matched against title, description and price"),
    # Kept as text: unparseable values fall back to the defaults
    page: Optional[str] = Query(None, description="1-based page number"),
    per_page: Optional[str] = Query(None, alias="perPage", description="Items per page"),
    service: SalesAnalyticsService = Depends(get_analytics_service),
) -> ListingPage:
    """
    List transactions with optional month filter, search and pagination.
    """
    query = ListingQuery(month=month, search=search, page=page, per_page=per_page)
    return await service.list_records(query)


@router.get("/statistics", response_model=Union[StatsResult, List[PeriodStats]])
async def get_statistics(
    month: Optional[str] = Query(None, description=MONTH_DESCRIPTION),
    service: SalesAnalyticsService = Depends(get_analytics_service),
) -> Union[StatsResult, List[PeriodStats]]:
    """
    Sale amount and sold/unsold counts for a month, or for every month when
    none is given.
    """
    return await service.get_statistics(month)


@router.get("/bar-chart", response_model=List[HistogramBin])
async def get_bar_chart(
    month: Optional[str] = Query(None, description=MONTH_DESCRIPTION),
    service: SalesAnalyticsService = Depends(get_analytics_service),
) -> List[HistogramBin]:
    """Item counts per price range for a month."""
    return await service.get_histogram(month)


@router.get("/pie-chart", response_model=List[CategoryCount])
async def get_pie_chart(
    month: Optional[str] = Query(None, description=MONTH_DESCRIPTION),
    service: SalesAnalyticsService = Depends(get_analytics_service),
) -> List[CategoryCount]:
    """Item counts per category, for a month or overall."""
    return await service.get_category_breakdown(month)


@router.get("/combined", response_model=CombinedResult)
async def get_combined(
    month: Optional[str] = Query(None, description=MONTH_DESCRIPTION),
    service: SalesAnalyticsService = Depends(get_analytics_service),
) -> CombinedResult:
    """Statistics, bar chart and pie chart for a month in one response."""
    logger.debug("get_combined called", month=month)
    return await service.get_combined(month)
