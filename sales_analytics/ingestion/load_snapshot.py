"""
Snapshot Loader

One-shot import of a local JSON snapshot of product sales into the
database. Runs outside the API: existing rows are replaced, never merged.

Usage:
    python -m sales_analytics.ingestion.load_snapshot data/product_transaction.json
"""

import argparse
import asyncio
from pathlib import Path

import structlog

from sales_analytics.config.logging import configure_logging
from sales_analytics.database.connection import close_database, init_database
from sales_analytics.store import SqlRecordStore
from sales_analytics.store.frame import read_snapshot

logger = structlog.get_logger(__name__)


async def load_snapshot(path: Path, create_schema: bool = True) -> int:
    """
    Replace every stored record with the snapshot's records.

    Args:
        path: JSON array of records with source field names (dateOfSale, ...)
        create_schema: Create the table first if it is missing

    Returns:
        Number of records loaded
    """
    records = read_snapshot(path)
    logger.info("Snapshot read", path=str(path), records=len(records))

    await init_database(create_schema=create_schema)
    try:
        loaded = await SqlRecordStore().replace_all(records)
    finally:
        await close_database()

    logger.info("Snapshot loaded", records=loaded)
    return loaded


def main() -> None:
    parser = argparse.ArgumentParser(description="Load a JSON snapshot of product sales into the database")
    parser.add_argument("path", type=Path, help="JSON file with an array of sale records")
    parser.add_argument("--no-create-schema", action="store_true", help="Do not create missing tables")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL for this run")
    args = parser.parse_args()

    configure_logging(log_level=args.log_level, log_format="text")
    asyncio.run(load_snapshot(args.path, create_schema=not args.no_create_schema))


if __name__ == "__main__":
    main()
