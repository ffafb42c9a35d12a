"""
Test Suite Configuration
"""
from datetime import datetime, timezone
from typing import AsyncGenerator, List

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from sales_analytics.analytics.schemas import SaleRecord
from sales_analytics.analytics.service import SalesAnalyticsService
from sales_analytics.config import Settings
from sales_analytics.database.models import Base
from sales_analytics.store import FrameRecordStore, SqlRecordStore


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(APP_ENV="testing", DEBUG=True)


@pytest.fixture
def sample_records() -> List[SaleRecord]:
    """
    Nine sales spread over 2021-11 .. 2022-12.

    March 2022 holds ids 1-4 (three sold, revenue 1298.85); prices sit on
    the histogram bucket edges (0, 100, 100.5, 101, 950).
    """
    rows = [
        (1, "Blue Shirt", "Cotton casual wear", "men's clothing", 19, True, utc(2022, 3, 5)),
        (2, "Gold Ring", "Elegant jewelry piece", "jewelery", 150, False, utc(2022, 3, 10)),
        (3, "SSD Drive", "Fast storage 1TB", "electronics", 329.85, True, utc(2022, 3, 20)),
        (4, "Winter Jacket", "Waterproof outer layer", "women's clothing", 950, True, utc(2022, 3, 31, 23, 59, 59)),
        (5, "Monitor", "27 inch display", "electronics", 100, False, utc(2022, 4, 1)),
        (6, "Backpack", "Laptop bag", "men's clothing", 101, True, utc(2022, 4, 15)),
        (7, "Bracelet", "Silver bracelet", "jewelery", 100.5, True, utc(2022, 12, 31, 12)),
        (8, "Old Camera", "Vintage film camera", "electronics", 45.5, True, utc(2021, 11, 27)),
        (9, "Straw Hat", "Summer hat", "women's clothing", 0, False, utc(2022, 2, 28)),
    ]
    return [
        SaleRecord(
            id=id_,
            title=title,
            description=description,
            category=category,
            price=price,
            image=f"https://example.com/{id_}.jpg",
            sold=sold,
            date_of_sale=date_of_sale,
        )
        for id_, title, description, category, price, sold, date_of_sale in rows
    ]


@pytest.fixture
def frame_store(sample_records) -> FrameRecordStore:
    """In-memory store loaded with the sample records"""
    return FrameRecordStore(sample_records)


@pytest.fixture
async def sqlite_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """SQLite database file with the schema created"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'sales.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


async def load_sql_store(engine: AsyncEngine, records: List[SaleRecord]) -> SqlRecordStore:
    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    store = SqlRecordStore(session_factory)
    await store.replace_all(records)
    return store


@pytest.fixture
async def sql_store(sqlite_engine, sample_records) -> SqlRecordStore:
    """SQL store loaded with the sample records"""
    return await load_sql_store(sqlite_engine, sample_records)


@pytest.fixture(params=["frame", "sql"])
async def store(request, sqlite_engine, sample_records):
    """Every record store implementation, loaded with the sample records"""
    if request.param == "frame":
        return FrameRecordStore(sample_records)
    return await load_sql_store(sqlite_engine, sample_records)


@pytest.fixture
def service(store) -> SalesAnalyticsService:
    """Service over each store implementation"""
    return SalesAnalyticsService(store, reference_year=2022)
