"""
Database Module
"""
from .connection import close_database, get_db, init_database
from .models import Base, ProductSale

__all__ = [
    "init_database",
    "close_database",
    "get_db",
    "Base",
    "ProductSale",
]
