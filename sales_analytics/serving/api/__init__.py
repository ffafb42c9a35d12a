"""
API Module
"""
from .dependencies import get_analytics_service
from .middleware import RequestLoggingMiddleware

__all__ = [
    "get_analytics_service",
    "RequestLoggingMiddleware",
]
