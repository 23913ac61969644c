"""Health check endpoint."""

from fastapi import APIRouter, Depends

from .. import __version__
from ..dependencies import get_cache, get_dataset
from ..services.cache import Cache
from ..services.dataset import DatasetLoader

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    cache: Cache = Depends(get_cache),
    dataset: DatasetLoader = Depends(get_dataset),
):
    """Health check and status endpoint."""
    return {
        "status": "ok",
        "version": __version__,
        "hasData": dataset.exists(),
        "cacheSize": len(cache),
    }
