"""
Ingestion Module
"""
from .load_snapshot import load_snapshot

__all__ = ["load_snapshot"]
