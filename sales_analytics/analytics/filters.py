"""
Record Filters

Store-neutral description of which records a query touches. Each record
store compiles a RecordFilter into its own query language (SQL conditions,
polars expressions), so the matching rules below are the contract every
store implements:

- window: date_of_sale in [start, end)
- search: case-insensitive literal substring of title, description, or the
  rendered price text (see render_price); the three fields are OR'd
- sold: exact match on the sold flag
- price_range: min <= price <= max, max None meaning unbounded

All present criteria are AND'd together.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from sales_analytics.analytics.calendar import TimeWindow


class GroupKey(str, Enum):
    """Keys a store can group record counts by"""
    CATEGORY = "category"
    PERIOD = "period"  # (year, month) of date_of_sale in UTC


@dataclass(frozen=True)
class RecordFilter:
    """Predicate over sale records"""

    window: Optional[TimeWindow] = None
    search: Optional[str] = None
    sold: Optional[bool] = None
    price_range: Optional[Tuple[float, Optional[float]]] = None


def render_price(price: float) -> str:
    """
    Text form of a price as searched by substring.

    Integral prices drop the fractional part ("19", not "19.0").
    """
    value = float(price)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def build_record_filter(
    window: Optional[TimeWindow] = None,
    search: Optional[str] = None,
    sold: Optional[bool] = None,
    price_range: Optional[Tuple[float, Optional[float]]] = None,
) -> RecordFilter:
    """
    Build a RecordFilter from request parameters.

    Blank search text is dropped so it never narrows the result.
    """
    needle = search.strip() if search else None
    return RecordFilter(
        window=window,
        search=needle or None,
        sold=sold,
        price_range=price_range,
    )
