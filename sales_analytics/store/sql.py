"""
SQL Record Store

RecordStore over the product_sales table through SQLAlchemy's async ORM.
Each call opens its own session, so concurrent queries from one request
never share a connection.
"""

from contextlib import contextmanager
from typing import AsyncContextManager, Callable, Dict, Hashable, Iterable, Iterator, List

import structlog
from sqlalchemy import String, cast, delete, func, insert, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sales_analytics.analytics.errors import StoreFailureError
from sales_analytics.analytics.filters import GroupKey, RecordFilter
from sales_analytics.analytics.record_store import check_numeric_field
from sales_analytics.analytics.schemas import SaleRecord
from sales_analytics.database.connection import get_db
from sales_analytics.database.models import ProductSale

logger = structlog.get_logger(__name__)

SessionFactory = Callable[[], AsyncContextManager[AsyncSession]]

INSERT_CHUNK_SIZE = 1000


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def compile_conditions(record_filter: RecordFilter) -> list:
    """Translate a RecordFilter into SQLAlchemy WHERE clauses."""
    conditions = []

    if record_filter.window is not None:
        conditions.append(ProductSale.date_of_sale >= record_filter.window.start)
        conditions.append(ProductSale.date_of_sale < record_filter.window.end)

    if record_filter.search:
        pattern = f"%{_escape_like(record_filter.search)}%"
        conditions.append(
            or_(
                ProductSale.title.ilike(pattern, escape="\\"),
                ProductSale.description.ilike(pattern, escape="\\"),
                cast(ProductSale.price, String).ilike(pattern, escape="\\"),
            )
        )

    if record_filter.sold is not None:
        conditions.append(ProductSale.sold.is_(record_filter.sold))

    if record_filter.price_range is not None:
        low, high = record_filter.price_range
        conditions.append(ProductSale.price >= low)
        if high is not None:
            conditions.append(ProductSale.price <= high)

    return conditions


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (SQLAlchemyError, OSError) as exc:
        logger.error("Record store query failed", operation=operation, error=str(exc), error_type=type(exc).__name__)
        raise StoreFailureError(f"{operation} failed: {exc}") from exc


class SqlRecordStore:
    """
    Record store backed by a relational database.

    Example:
        store = SqlRecordStore()  # uses the application's get_db sessions
        total = await store.count(RecordFilter(sold=True))
    """

    def __init__(self, session_factory: SessionFactory = get_db):
        self._session_factory = session_factory

    async def count(self, record_filter: RecordFilter) -> int:
        stmt = select(func.count()).select_from(ProductSale).where(*compile_conditions(record_filter))
        with _translate_errors("count"):
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return int(result.scalar_one())

    async def find(self, record_filter: RecordFilter, skip: int, limit: int) -> List[SaleRecord]:
        stmt = (
            select(ProductSale)
            .where(*compile_conditions(record_filter))
            .order_by(ProductSale.row_id)
            .offset(skip)
            .limit(limit)
        )
        with _translate_errors("find"):
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
        return [SaleRecord.model_validate(row) for row in rows]

    async def sum_where(self, record_filter: RecordFilter, field: str) -> float:
        column = getattr(ProductSale, check_numeric_field(field))
        stmt = select(func.coalesce(func.sum(column), 0)).where(*compile_conditions(record_filter))
        with _translate_errors("sum_where"):
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return float(result.scalar_one())

    async def group_by(self, record_filter: RecordFilter, key: GroupKey) -> Dict[Hashable, int]:
        conditions = compile_conditions(record_filter)
        if key is GroupKey.CATEGORY:
            stmt = (
                select(ProductSale.category, func.count().label("count"))
                .where(*conditions)
                .group_by(ProductSale.category)
            )
        else:
            year = func.extract("year", ProductSale.date_of_sale)
            month = func.extract("month", ProductSale.date_of_sale)
            stmt = (
                select(year.label("year"), month.label("month"), func.count().label("count"))
                .where(*conditions)
                .group_by(year, month)
            )

        with _translate_errors("group_by"):
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                rows = result.all()

        if key is GroupKey.CATEGORY:
            return {row.category: int(row.count) for row in rows}
        return {(int(row.year), int(row.month)): int(row.count) for row in rows}

    async def replace_all(self, records: Iterable[SaleRecord]) -> int:
        rows = [record.model_dump() for record in records]
        with _translate_errors("replace_all"):
            async with self._session_factory() as session:
                await session.execute(delete(ProductSale))
                for i in range(0, len(rows), INSERT_CHUNK_SIZE):
                    await session.execute(insert(ProductSale), rows[i:i + INSERT_CHUNK_SIZE])
                await session.commit()
        logger.info("Record store replaced", records=len(rows))
        return len(rows)
