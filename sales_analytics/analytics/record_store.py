"""
Record Store Interface

The only door between the query engine and persisted sale records. Every
method is a suspension point; implementations raise StoreFailureError for
any failure of the underlying backend.
"""

from typing import Dict, Hashable, Iterable, List, Protocol, runtime_checkable

from sales_analytics.analytics.filters import GroupKey, RecordFilter
from sales_analytics.analytics.schemas import SaleRecord

# Fields sum_where accepts
NUMERIC_FIELDS = ("price",)


@runtime_checkable
class RecordStore(Protocol):
    """Read-mostly access to sale records"""

    async def count(self, record_filter: RecordFilter) -> int:
        """Number of records matching the filter."""
        ...

    async def find(self, record_filter: RecordFilter, skip: int, limit: int) -> List[SaleRecord]:
        """Matching records in natural order, skipping `skip` and taking up to `limit`."""
        ...

    async def sum_where(self, record_filter: RecordFilter, field: str) -> float:
        """Sum of a numeric field over matching records, 0 when none match."""
        ...

    async def group_by(self, record_filter: RecordFilter, key: GroupKey) -> Dict[Hashable, int]:
        """
        Count matching records per group.

        Keys are category names for GroupKey.CATEGORY and (year, month)
        tuples for GroupKey.PERIOD.
        """
        ...

    async def replace_all(self, records: Iterable[SaleRecord]) -> int:
        """One-shot import: drop every record and load the given ones."""
        ...


def check_numeric_field(field: str) -> str:
    """Reject sum_where fields that are not numeric record attributes."""
    if field not in NUMERIC_FIELDS:
        raise ValueError(f"Cannot sum field {field!r}; expected one of {NUMERIC_FIELDS}")
    return field
