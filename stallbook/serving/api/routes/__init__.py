"""
API Routes Module
"""
from .health import router as health_router
from .entries import router as entries_router
from .expenses import router as expenses_router
from .analytics import router as analytics_router

__all__ = [
    "health_router",
    "entries_router",
    "expenses_router",
    "analytics_router",
]
