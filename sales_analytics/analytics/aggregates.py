"""
Sales Aggregations

Pure functions of a RecordStore and already-validated inputs: listing
pages, revenue statistics, price histograms and category breakdowns. Store
calls that do not depend on each other are issued concurrently.
"""

import asyncio
import math
from dataclasses import dataclass
from typing import Any, Awaitable, List, Optional

from sales_analytics.analytics.calendar import TimeWindow, month_window
from sales_analytics.analytics.filters import GroupKey, RecordFilter, build_record_filter
from sales_analytics.analytics.record_store import RecordStore
from sales_analytics.analytics.schemas import (
    CategoryCount,
    HistogramBin,
    ListingPage,
    PeriodStats,
    StatsResult,
)


@dataclass(frozen=True)
class PriceBucket:
    """Price range with inclusive bounds; max None is open-ended"""
    label: str
    min: float
    max: Optional[float]


# Bounds are inclusive integers, so integral prices land in exactly one
# bucket while prices strictly between N00 and N01 land in none.
PRICE_BUCKETS = (
    PriceBucket("0-100", 0, 100),
    PriceBucket("101-200", 101, 200),
    PriceBucket("201-300", 201, 300),
    PriceBucket("301-400", 301, 400),
    PriceBucket("401-500", 401, 500),
    PriceBucket("501-600", 501, 600),
    PriceBucket("601-700", 601, 700),
    PriceBucket("701-800", 701, 800),
    PriceBucket("801-900", 801, 900),
    PriceBucket("901-above", 901, None),
)


async def gather_all(*aws: Awaitable[Any]) -> List[Any]:
    """
    Run awaitables concurrently and return their results in argument order.

    The first failure cancels every task still running and is re-raised
    unchanged; no partial result is returned.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


async def paginate(
    store: RecordStore,
    record_filter: RecordFilter,
    page: int,
    per_page: int,
) -> ListingPage:
    """
    Count matches and fetch one page of them.

    Args:
        store: Record store to read
        record_filter: Records to list
        page: 1-based page number
        per_page: Page size, at least 1
    """
    total_items, items = await gather_all(
        store.count(record_filter),
        store.find(record_filter, skip=(page - 1) * per_page, limit=per_page),
    )
    return ListingPage(
        total_items=total_items,
        total_pages=math.ceil(total_items / per_page),
        current_page=page,
        per_page=per_page,
        items=items,
    )


async def window_statistics(store: RecordStore, window: TimeWindow) -> StatsResult:
    """Revenue of sold records plus sold and unsold counts inside one window."""
    sold = build_record_filter(window=window, sold=True)
    not_sold = build_record_filter(window=window, sold=False)

    total_sale_amount, total_sold, total_not_sold = await gather_all(
        store.sum_where(sold, "price"),
        store.count(sold),
        store.count(not_sold),
    )
    return StatsResult(
        total_sale_amount=total_sale_amount,
        total_sold=total_sold,
        total_not_sold=total_not_sold,
    )


async def period_statistics(store: RecordStore) -> List[PeriodStats]:
    """
    Statistics for every (year, month) present, oldest first.

    Periods come from grouping all records; each period's revenue is then
    summed over that month's window.
    """
    every_period, sold_counts, not_sold_counts = await gather_all(
        store.group_by(RecordFilter(), GroupKey.PERIOD),
        store.group_by(RecordFilter(sold=True), GroupKey.PERIOD),
        store.group_by(RecordFilter(sold=False), GroupKey.PERIOD),
    )

    periods = sorted(every_period)
    amounts = await gather_all(*(
        store.sum_where(RecordFilter(window=month_window(year, month), sold=True), "price")
        for year, month in periods
    ))

    return [
        PeriodStats(
            year=year,
            month=month,
            total_sale_amount=amount,
            total_sold=sold_counts.get((year, month), 0),
            total_not_sold=not_sold_counts.get((year, month), 0),
        )
        for (year, month), amount in zip(periods, amounts)
    ]


async def price_histogram(store: RecordStore, window: TimeWindow) -> List[HistogramBin]:
    """Record count per fixed price bucket inside one window, in bucket order."""
    counts = await gather_all(*(
        store.count(RecordFilter(window=window, price_range=(bucket.min, bucket.max)))
        for bucket in PRICE_BUCKETS
    ))
    return [
        HistogramBin(label=bucket.label, count=count)
        for bucket, count in zip(PRICE_BUCKETS, counts)
    ]


async def category_breakdown(store: RecordStore, window: Optional[TimeWindow] = None) -> List[CategoryCount]:
    """Record count per category, inside a window when one is given."""
    counts = await store.group_by(RecordFilter(window=window), GroupKey.CATEGORY)
    return [CategoryCount(category=category, count=count) for category, count in counts.items()]
