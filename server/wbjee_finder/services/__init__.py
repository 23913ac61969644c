"""Services for the WBJEE Finder server."""

from .cache import Cache
from .dataset import DatasetLoader, DATA_CACHE_KEY
from .rate_limiter import RateLimiter, RateLimitConfig
from .scheduler import PeriodicTask

__all__ = [
    "Cache",
    "DatasetLoader",
    "DATA_CACHE_KEY",
    "RateLimiter",
    "RateLimitConfig",
    "PeriodicTask",
]
