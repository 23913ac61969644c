"""Cache administration endpoints."""

import logging

from fastapi import APIRouter, Depends

from ..dependencies import get_cache, require_admin
from ..services.cache import Cache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cache", tags=["cache"], dependencies=[Depends(require_admin)])


@router.get("/stats")
async def cache_stats(cache: Cache = Depends(get_cache)):
    """Hit/miss counters, hit rate and entry count."""
    return cache.stats()


@router.post("/clear")
async def clear_cache(cache: Cache = Depends(get_cache)):
    """Drop every cached entry and reset the counters."""
    cleared = cache.clear()
    logger.info("Cache cleared (%d entries)", cleared)
    return {"message": "Cache cleared", "clearedEntries": cleared}
