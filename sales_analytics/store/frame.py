"""
In-Memory Record Store

RecordStore over a polars DataFrame. Useful for serving a JSON snapshot of
the source dataset without a database, and as a fast store in tests.

Timestamps are kept as naive UTC so window bounds compare without any
time-zone casting; the rendered price text is precomputed once per load.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Hashable, Iterable, List, Union

import polars as pl
import structlog
from pydantic import TypeAdapter

from sales_analytics.analytics.errors import StoreFailureError
from sales_analytics.analytics.filters import GroupKey, RecordFilter, render_price
from sales_analytics.analytics.record_store import check_numeric_field
from sales_analytics.analytics.schemas import SaleRecord

logger = structlog.get_logger(__name__)

FRAME_SCHEMA = {
    "id": pl.Int64,
    "title": pl.Utf8,
    "description": pl.Utf8,
    "category": pl.Utf8,
    "image": pl.Utf8,
    "price": pl.Float64,
    "sold": pl.Boolean,
    "date_of_sale": pl.Datetime("us"),
    "price_text": pl.Utf8,
}

SEARCH_COLUMNS = ("title", "description", "price_text")

_records_adapter = TypeAdapter(List[SaleRecord])


def read_snapshot(path: Union[str, Path]) -> List[SaleRecord]:
    """Read a JSON array of records using the source field names (dateOfSale, ...)."""
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return _records_adapter.validate_python(payload)


def _naive_utc(instant: datetime) -> datetime:
    return instant.astimezone(timezone.utc).replace(tzinfo=None)


def records_to_frame(records: Iterable[SaleRecord]) -> pl.DataFrame:
    """Build the store's DataFrame from validated records."""
    columns: Dict[str, list] = {name: [] for name in FRAME_SCHEMA}
    for record in records:
        columns["id"].append(record.id)
        columns["title"].append(record.title)
        columns["description"].append(record.description)
        columns["category"].append(record.category)
        columns["image"].append(record.image)
        columns["price"].append(record.price)
        columns["sold"].append(record.sold)
        columns["date_of_sale"].append(_naive_utc(record.date_of_sale))
        columns["price_text"].append(render_price(record.price))
    return pl.DataFrame(columns, schema=FRAME_SCHEMA)


def compile_expression(record_filter: RecordFilter) -> pl.Expr:
    """Translate a RecordFilter into a polars boolean expression."""
    expr = pl.lit(True)

    if record_filter.window is not None:
        expr = expr & (pl.col("date_of_sale") >= _naive_utc(record_filter.window.start))
        expr = expr & (pl.col("date_of_sale") < _naive_utc(record_filter.window.end))

    if record_filter.search:
        needle = record_filter.search.lower()
        expr = expr & pl.any_horizontal(
            [pl.col(name).str.to_lowercase().str.contains(needle, literal=True) for name in SEARCH_COLUMNS]
        )

    if record_filter.sold is not None:
        expr = expr & (pl.col("sold") == record_filter.sold)

    if record_filter.price_range is not None:
        low, high = record_filter.price_range
        expr = expr & (pl.col("price") >= low)
        if high is not None:
            expr = expr & (pl.col("price") <= high)

    return expr


class FrameRecordStore:
    """
    Record store held in memory.

    Example:
        store = FrameRecordStore.from_json("data/product_transaction.json")
        page = await store.find(RecordFilter(search="shirt"), skip=0, limit=10)
    """

    def __init__(self, records: Iterable[SaleRecord] = ()):
        self._frame = records_to_frame(records)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "FrameRecordStore":
        """Load a store from a JSON snapshot, see read_snapshot."""
        records = read_snapshot(path)
        logger.info("Loaded records from snapshot", path=str(path), records=len(records))
        return cls(records)

    def _matching(self, record_filter: RecordFilter) -> pl.DataFrame:
        try:
            return self._frame.filter(compile_expression(record_filter))
        except pl.exceptions.PolarsError as exc:
            logger.error("Record store query failed", error=str(exc), error_type=type(exc).__name__)
            raise StoreFailureError(f"filter failed: {exc}") from exc

    async def count(self, record_filter: RecordFilter) -> int:
        return self._matching(record_filter).height

    async def find(self, record_filter: RecordFilter, skip: int, limit: int) -> List[SaleRecord]:
        page = self._matching(record_filter).slice(skip, limit).drop("price_text")
        return [SaleRecord.model_validate(row) for row in page.to_dicts()]

    async def sum_where(self, record_filter: RecordFilter, field: str) -> float:
        column = self._matching(record_filter).get_column(check_numeric_field(field))
        return float(column.sum() or 0)

    async def group_by(self, record_filter: RecordFilter, key: GroupKey) -> Dict[Hashable, int]:
        matching = self._matching(record_filter)
        if key is GroupKey.CATEGORY:
            grouped = matching.group_by("category", maintain_order=True).agg(pl.len().alias("count"))
            return {row["category"]: row["count"] for row in grouped.to_dicts()}

        grouped = matching.group_by(
            pl.col("date_of_sale").dt.year().alias("year"),
            pl.col("date_of_sale").dt.month().alias("month"),
        ).agg(pl.len().alias("count"))
        return {(row["year"], row["month"]): row["count"] for row in grouped.to_dicts()}

    async def replace_all(self, records: Iterable[SaleRecord]) -> int:
        self._frame = records_to_frame(records)
        logger.info("Record store replaced", records=self._frame.height)
        return self._frame.height
