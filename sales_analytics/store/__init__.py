"""
Record Store Module
"""
from sales_analytics.analytics.record_store import RecordStore
from .frame import FrameRecordStore
from .sql import SqlRecordStore

__all__ = [
    "RecordStore",
    "FrameRecordStore",
    "SqlRecordStore",
]
