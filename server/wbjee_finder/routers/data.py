"""Dataset endpoints."""

import asyncio
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, Response

from ..config import Settings
from ..dependencies import get_app_settings, get_cache, get_dataset, require_allowed_origin
from ..middleware import get_client_ip
from ..services.cache import Cache
from ..services.dataset import DatasetLoader, DATA_CACHE_KEY

logger = logging.getLogger(__name__)

router = APIRouter(tags=["data"])


@router.get("/data", dependencies=[Depends(require_allowed_origin)])
async def get_data(
    request: Request,
    cache: Cache = Depends(get_cache),
    dataset: DatasetLoader = Depends(get_dataset),
    settings: Settings = Depends(get_app_settings),
):
    """Serve the ORCR dataset, from cache when possible."""
    logger.info(
        "Data request from IP: %s at %s",
        get_client_ip(request, settings.trust_proxy),
        datetime.now(timezone.utc).isoformat(),
    )

    payload = cache.get(DATA_CACHE_KEY)
    cache_status = "HIT"
    if payload is None:
        payload = await asyncio.to_thread(dataset.load)
        cache.set(DATA_CACHE_KEY, payload)
        cache_status = "MISS"

    return Response(
        content=payload,
        media_type="application/json",
        headers={"X-Cache": cache_status},
    )


@router.get("/compression-status")
async def compression_status(
    request: Request,
    dataset: DatasetLoader = Depends(get_dataset),
    settings: Settings = Depends(get_app_settings),
):
    """Report how responses are compressed and whether this client accepts gzip."""
    accept_encoding = request.headers.get("Accept-Encoding", "")
    encodings = {part.split(";")[0].strip().lower() for part in accept_encoding.split(",")}

    return {
        "compression": "gzip",
        "minimumSize": settings.gzip_minimum_size,
        "clientAcceptsGzip": "gzip" in encodings or "*" in encodings,
        "datasetBytes": dataset.size(),
    }
