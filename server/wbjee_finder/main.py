"""WBJEE Finder FastAPI Application Entry Point."""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse

from . import __version__
from .config import Settings, get_settings
from .errors import register_error_handlers
from .middleware import RateLimitMiddleware, SecurityHeadersMiddleware
from .routers import data_router, cache_router, health_router
from .services import Cache, DatasetLoader, PeriodicTask, RateLimiter, RateLimitConfig

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """JSON lines in production, human-readable output locally."""
    if settings.is_production:
        logging.basicConfig(
            level=logging.INFO,
            format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
            stream=sys.stdout,
        )
    else:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the periodic maintenance tasks for the lifetime of the server."""
    for task in app.state.tasks:
        task.start()
    try:
        yield
    finally:
        for task in app.state.tasks:
            await task.stop()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="WBJEE Finder",
        description="ORCR cutoff data server",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    # One cache and one limiter per process, shared through app.state
    cache = Cache(ttl=settings.cache_ttl)
    limiter = RateLimiter(
        RateLimitConfig(
            max_requests=settings.rate_limit_max,
            window_seconds=settings.rate_limit_window,
        )
    )
    app.state.settings = settings
    app.state.cache = cache
    app.state.rate_limiter = limiter
    app.state.dataset = DatasetLoader(settings.data_path)
    app.state.tasks = [
        PeriodicTask("cache-sweep", settings.cache_sweep_interval, cache.sweep),
        PeriodicTask("rate-limit-prune", settings.rate_limit_window, limiter.prune),
    ]

    # Middleware: the last one added runs first
    app.add_middleware(GZipMiddleware, minimum_size=settings.gzip_minimum_size)
    app.add_middleware(
        RateLimitMiddleware,
        limiter=limiter,
        prefix="/api/",
        trust_proxy=settings.trust_proxy,
    )
    app.add_middleware(SecurityHeadersMiddleware, hsts=settings.is_production)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Include routers with /api prefix
    app.include_router(data_router, prefix="/api")
    app.include_router(cache_router, prefix="/api")
    app.include_router(health_router, prefix="/api")

    public_dir = settings.public_path

    @app.get("/", include_in_schema=False)
    async def serve_index():
        """Serve the index.html for the root path."""
        index = public_dir / "index.html"
        if not index.is_file():
            raise HTTPException(status_code=404)
        return FileResponse(index)

    # Serve static files (index.html, sw.js, manifest.json, ...)
    if public_dir.is_dir():
        app.mount("/", StaticFiles(directory=public_dir), name="public")
    else:
        logger.warning("Static directory %s not found; serving API only", public_dir)

    return app


app = create_app()


def run():
    """Run the server."""
    settings = get_settings()
    logger.info("Server running on port %s", settings.port)
    logger.info("Visit: http://localhost:%s", settings.port)
    uvicorn.run(
        "wbjee_finder.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
