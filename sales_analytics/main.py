"""
FastAPI Application

Main entry point for the Sales Analytics API.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from sales_analytics.analytics.errors import (
    AnalyticsError,
    InvalidMonthError,
    MissingMonthError,
    StoreFailureError,
)
from sales_analytics.analytics.record_store import RecordStore
from sales_analytics.analytics.service import SalesAnalyticsService
from sales_analytics.config import Settings, get_settings
from sales_analytics.config.logging import configure_logging
from sales_analytics.database.connection import close_database, init_database
from sales_analytics.serving.api.middleware import RequestLoggingMiddleware
from sales_analytics.serving.api.routes import analytics_router, health_router
from sales_analytics.store import FrameRecordStore, SqlRecordStore

settings = get_settings()
logger = structlog.get_logger(__name__)

ERROR_STATUS_CODES = {
    InvalidMonthError: 400,
    MissingMonthError: 400,
    StoreFailureError: 500,
}


async def build_record_store(app_settings: Settings) -> RecordStore:
    """Create the record store selected by ANALYTICS_STORE_BACKEND."""
    if app_settings.analytics.store_backend == "file":
        if not app_settings.analytics.data_file:
            raise RuntimeError("ANALYTICS_DATA_FILE is required for the file store backend")
        return FrameRecordStore.from_json(app_settings.analytics.data_file)

    await init_database()
    return SqlRecordStore()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()
    logger.info("Starting Sales Analytics API", app=settings.app_name, backend=settings.analytics.store_backend)

    store = await build_record_store(settings)
    app.state.analytics_service = SalesAnalyticsService(
        store,
        reference_year=settings.analytics.reference_year,
        default_per_page=settings.analytics.default_per_page,
    )

    yield

    logger.info("Shutting down...")
    await close_database()


app = FastAPI(
    title="Sales Analytics API",
    description="Monthly sales statistics, price histograms and category breakdowns over product sales",
    version=settings.version,
    debug=settings.debug,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.security.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(AnalyticsError)
async def analytics_error_handler(request: Request, exc: AnalyticsError) -> JSONResponse:
    """Report engine failures as JSON with a status per error kind."""
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    if status_code >= 500:
        logger.error("Analytics query failed", path=request.url.path, error=str(exc), error_type=exc.code)
    else:
        logger.warning("Analytics request rejected", path=request.url.path, error=str(exc), error_type=exc.code)
    return JSONResponse(status_code=status_code, content={"error": exc.code, "detail": str(exc)})


app.include_router(health_router, prefix="/api/v1", tags=["Health"])
app.include_router(analytics_router, prefix="/api/v1", tags=["Analytics"])


@app.get("/api/v1/info")
async def api_info():
    """API information endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.version,
        "environment": settings.app_env,
        "reference_year": settings.analytics.reference_year,
        "documentation": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
