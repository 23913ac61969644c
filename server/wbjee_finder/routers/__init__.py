"""API Routers for the WBJEE Finder server."""

from .data import router as data_router
from .cache import router as cache_router
from .health import router as health_router

__all__ = [
    "data_router",
    "cache_router",
    "health_router",
]
