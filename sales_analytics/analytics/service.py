"""
Sales Analytics Service

The query operations callers use: transaction listing, statistics, price
histogram, category breakdown and the combined monthly view. Month text is
validated here, before any store access.
"""

from typing import List, Optional, Union

import structlog

from sales_analytics.analytics.aggregates import (
    category_breakdown,
    gather_all,
    paginate,
    period_statistics,
    price_histogram,
    window_statistics,
)
from sales_analytics.analytics.calendar import TimeWindow, resolve_month_window
from sales_analytics.analytics.errors import MissingMonthError
from sales_analytics.analytics.filters import build_record_filter
from sales_analytics.analytics.record_store import RecordStore
from sales_analytics.analytics.schemas import (
    CategoryCount,
    CombinedResult,
    HistogramBin,
    ListingPage,
    ListingQuery,
    PeriodStats,
    StatsResult,
)

logger = structlog.get_logger(__name__)


class SalesAnalyticsService:
    """
    Query engine over a record store.

    Holds no per-request state; one instance serves concurrent requests.

    Example:
        service = SalesAnalyticsService(FrameRecordStore(records), reference_year=2022)
        stats = await service.get_statistics("March")
    """

    def __init__(self, store: RecordStore, reference_year: int, default_per_page: int = 10):
        self.store = store
        self.reference_year = reference_year
        self.default_per_page = default_per_page

    def _window(self, month: Optional[str]) -> Optional[TimeWindow]:
        return resolve_month_window(month, self.reference_year)

    def _required_window(self, month: Optional[str], operation: str) -> TimeWindow:
        window = self._window(month)
        if window is None:
            raise MissingMonthError(operation)
        return window

    async def list_records(self, query: ListingQuery) -> ListingPage:
        """List records matching the month and search text, one page at a time."""
        window = self._window(query.month)
        page = query.page or 1
        per_page = query.per_page or self.default_per_page

        listing = await paginate(
            self.store,
            build_record_filter(window=window, search=query.search),
            page=page,
            per_page=per_page,
        )
        logger.debug(
            "Records listed",
            month=query.month,
            search=query.search,
            page=page,
            per_page=per_page,
            total_items=listing.total_items,
        )
        return listing

    async def get_statistics(self, month: Optional[str] = None) -> Union[StatsResult, List[PeriodStats]]:
        """
        Revenue and sold/unsold counts.

        With a month, one StatsResult for that month of the reference year.
        Without, one PeriodStats per (year, month) present, oldest first.
        """
        window = self._window(month)
        if window is None:
            periods = await period_statistics(self.store)
            logger.debug("Period statistics computed", periods=len(periods))
            return periods

        stats = await window_statistics(self.store, window)
        logger.debug("Monthly statistics computed", month=month, total_sold=stats.total_sold)
        return stats

    async def get_histogram(self, month: Optional[str]) -> List[HistogramBin]:
        """Price histogram for one month."""
        window = self._required_window(month, "histogram")
        return await price_histogram(self.store, window)

    async def get_category_breakdown(self, month: Optional[str] = None) -> List[CategoryCount]:
        """Record count per category, for one month or overall."""
        return await category_breakdown(self.store, self._window(month))

    async def get_combined(self, month: Optional[str]) -> CombinedResult:
        """
        Statistics, histogram and category breakdown for one month.

        The three run concurrently; if any fails the others are cancelled
        and that failure is raised.
        """
        window = self._required_window(month, "combined view")

        statistics, histogram, categories = await gather_all(
            window_statistics(self.store, window),
            price_histogram(self.store, window),
            category_breakdown(self.store, window),
        )
        logger.info("Combined view computed", month=month, categories=len(categories))
        return CombinedResult(statistics=statistics, histogram=histogram, categories=categories)
