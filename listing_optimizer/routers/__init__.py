"""
API Routers for the listing optimizer
"""
from .optimize import router as optimize_router
from .history import router as history_router

__all__ = [
    "optimize_router",
    "history_router",
]
