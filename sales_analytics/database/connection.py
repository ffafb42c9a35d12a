"""
Database Connection Management

Async SQLAlchemy 2.0 engine and session factory with graceful shutdown.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from sales_analytics.config import get_settings
from sales_analytics.database.models import Base

logger = structlog.get_logger(__name__)

# Global engine and session factory
_engine: Optional[AsyncEngine] = None
_async_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


async def init_database(create_schema: Optional[bool] = None) -> AsyncEngine:
    """
    Initialize the database engine.

    Args:
        create_schema: Create missing tables; defaults to POSTGRES_CREATE_SCHEMA

    Returns:
        AsyncEngine: The initialized database engine
    """
    global _engine, _async_session_factory

    if _engine is not None:
        logger.warning("Database already initialized")
        return _engine

    settings = get_settings()
    url = settings.database.async_url

    engine_config = {
        "echo": settings.database.echo,
        "pool_pre_ping": True,
    }
    if url.startswith("postgresql+asyncpg"):
        # Month grouping extracts (year, month) server side; keep it in UTC
        engine_config["connect_args"] = {"server_settings": {"timezone": "UTC"}}
        engine_config["pool_size"] = settings.database.pool_size
        engine_config["max_overflow"] = settings.database.max_overflow
        engine_config["pool_timeout"] = settings.database.pool_timeout
    else:
        engine_config["poolclass"] = NullPool

    _engine = create_async_engine(url, **engine_config)

    _async_session_factory = async_sessionmaker(
        bind=_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    if create_schema is None:
        create_schema = settings.database.create_schema

    try:
        async with _engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if create_schema:
                await conn.run_sync(Base.metadata.create_all)
                logger.info("Database schema ensured")
        logger.info(
            "Database connection established",
            host=settings.database.host,
            database=settings.database.db,
        )
    except Exception as e:
        logger.error("Failed to connect to database", error=str(e))
        await close_database()
        raise

    return _engine


async def close_database() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _async_session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
        logger.info("Database connection pool closed")


@asynccontextmanager
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session.

    Commits on success, rolls back and re-raises on error.

    Yields:
        AsyncSession: Database session

    Example:
        async with get_db() as db:
            result = await db.execute(query)
    """
    if _async_session_factory is None:
        logger.error("Database not initialized when get_db() called")
        raise RuntimeError("Database not initialized. Call init_database() first.")

    session = _async_session_factory()
    try:
        yield session
        await session.commit()
    except Exception as e:
        logger.error("Database session error, rolling back", error=str(e), error_type=type(e).__name__)
        await session.rollback()
        raise
    finally:
        await session.close()
