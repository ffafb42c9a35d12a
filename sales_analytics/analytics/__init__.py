"""
Sales Analytics Query Engine
"""
from .calendar import TimeWindow, month_window, resolve_month_window
from .errors import AnalyticsError, InvalidMonthError, MissingMonthError, StoreFailureError
from .filters import GroupKey, RecordFilter, build_record_filter
from .schemas import ListingQuery, SaleRecord
from .service import SalesAnalyticsService

__all__ = [
    "TimeWindow",
    "month_window",
    "resolve_month_window",
    "AnalyticsError",
    "InvalidMonthError",
    "MissingMonthError",
    "StoreFailureError",
    "GroupKey",
    "RecordFilter",
    "build_record_filter",
    "ListingQuery",
    "SaleRecord",
    "SalesAnalyticsService",
]
