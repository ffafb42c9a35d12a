"""
Unit Tests - Snapshot Loading and Logging
"""
import importlib
import json
import logging
import sys

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from sales_analytics.analytics.filters import RecordFilter
from sales_analytics.config import get_settings
from sales_analytics.config.logging import configure_logging, get_logger
from sales_analytics.ingestion import load_snapshot
from sales_analytics.store import SqlRecordStore

load_snapshot_module = importlib.import_module("sales_analytics.ingestion.load_snapshot")


@pytest.fixture
def snapshot_file(tmp_path, sample_records):
    """Snapshot JSON in the source field layout"""
    path = tmp_path / "product_transaction.json"
    path.write_text(json.dumps([
        record.model_dump(mode="json", by_alias=True) for record in sample_records
    ]))
    return path


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    """Point the application database at a SQLite file"""
    url = f"sqlite+aiosqlite:///{tmp_path / 'loaded.db'}"
    monkeypatch.setenv("POSTGRES_URL", url)
    get_settings.cache_clear()
    yield url
    get_settings.cache_clear()


class TestLoadSnapshot:
    """Tests for the one-shot snapshot import"""

    async def test_loads_every_record(self, snapshot_file, database_url):
        """Test the snapshot lands in the database"""
        loaded = await load_snapshot(snapshot_file)

        engine = create_async_engine(database_url)
        try:
            store = SqlRecordStore(async_sessionmaker(bind=engine, class_=AsyncSession))
            assert loaded == 9
            assert await store.count(RecordFilter()) == 9
        finally:
            await engine.dispose()

    async def test_reload_replaces(self, snapshot_file, database_url):
        """Test loading twice keeps a single copy of each record"""
        await load_snapshot(snapshot_file)
        loaded = await load_snapshot(snapshot_file, create_schema=False)

        assert loaded == 9

    async def test_invalid_snapshot_rejected(self, tmp_path, database_url):
        """Test malformed records fail before the database is touched"""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"id": 1, "title": "No price"}]))

        with pytest.raises(ValueError):
            await load_snapshot(path)


class TestLogging:
    """Tests for logging configuration"""

    def test_configure_logging_sets_level(self):
        """Test the root logger follows the configured level"""
        configure_logging(log_level="WARNING", log_format="text")

        assert logging.getLogger().level == logging.WARNING
        configure_logging(log_level="INFO", log_format="json")

    def test_get_logger(self):
        """Test structlog loggers are returned"""
        logger = get_logger("tests")

        assert hasattr(logger, "info")

    def test_database_loggers_stay_quiet(self):
        """Test driver loggers are held at WARNING when SQL echo is off"""
        configure_logging(log_level="DEBUG", log_format="text")

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").propagate is False
        configure_logging(log_level="INFO", log_format="json")

    def test_loader_cli_passes_log_level(self, monkeypatch, tmp_path):
        """Test the command line loader forwards its options"""
        calls = {}

        async def fake_load(path, create_schema=True):
            calls["path"] = path
            calls["create_schema"] = create_schema
            return 0

        monkeypatch.setattr(load_snapshot_module, "load_snapshot", fake_load)
        monkeypatch.setattr(
            sys, "argv",
            ["sales-analytics-load", str(tmp_path / "snapshot.json"), "--no-create-schema", "--log-level", "ERROR"],
        )

        load_snapshot_module.main()

        assert calls == {"path": tmp_path / "snapshot.json", "create_schema": False}
        assert logging.getLogger().level == logging.ERROR
        configure_logging(log_level="INFO", log_format="json")
