"""
Query Engine Schemas

Typed request parameters and result payloads. Results serialize with
camelCase names (totalSaleAmount, dateOfSale, ...) and are built fresh on
every request.
"""

import math
import re
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_LEADING_INT = re.compile(r"\s*([+-]?)0*(\d+)")

# Page numbers and sizes are capped so offset = (page - 1) * per_page fits a
# signed 64-bit integer in every store
MAX_PAGE_NUMBER = 2**31 - 1


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# RECORDS
# =============================================================================

class SaleRecord(CamelModel):
    """One product-sale entry"""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    description: str
    category: str
    price: float = Field(ge=0)
    image: str = ""
    sold: bool
    date_of_sale: datetime

    @field_validator("date_of_sale")
    @classmethod
    def normalize_to_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are taken as UTC; aware ones are converted"""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


# =============================================================================
# REQUEST PARAMETERS
# =============================================================================

def parse_positive_int(value: Any) -> Optional[int]:
    """
    Read a page number the way query strings are usually read.

    Strings parse their leading integer ("3", " 2abc" -> 2). Anything
    unparseable or below 1 yields None so the caller applies its default;
    values above MAX_PAGE_NUMBER are clamped to it.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        number = int(value) if math.isfinite(value) else None
    else:
        match = _LEADING_INT.match(str(value))
        if match is None or match.group(1) == "-":
            number = None
        elif len(match.group(2)) > len(str(MAX_PAGE_NUMBER)):
            number = MAX_PAGE_NUMBER
        else:
            number = int(match.group(2))
    if number is None or number < 1:
        return None
    return min(number, MAX_PAGE_NUMBER)


class ListingQuery(CamelModel):
    """Parameters of a transaction listing"""

    month: Optional[str] = None
    search: Optional[str] = None
    page: Optional[int] = None
    per_page: Optional[int] = None

    @field_validator("page", "per_page", mode="before")
    @classmethod
    def coerce_page_number(cls, v: Any) -> Optional[int]:
        return parse_positive_int(v)


# =============================================================================
# RESULTS
# =============================================================================

class ListingPage(CamelModel):
    """One page of matching records"""
    total_items: int
    total_pages: int
    current_page: int
    per_page: int
    items: List[SaleRecord]


class StatsResult(CamelModel):
    """Revenue and sold/unsold counts for one period"""
    total_sale_amount: float
    total_sold: int
    total_not_sold: int


class PeriodStats(StatsResult):
    """Statistics for one (year, month) group"""
    year: int
    month: int


class HistogramBin(CamelModel):
    """Record count for one price bucket"""
    label: str = Field(alias="range")
    count: int


class CategoryCount(CamelModel):
    """Record count for one category"""
    category: str
    count: int


class CombinedResult(CamelModel):
    """Statistics, histogram and categories for one month"""
    statistics: StatsResult
    histogram: List[HistogramBin]
    categories: List[CategoryCount]
