"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import SECURITY_HEADERS

logger = logging.getLogger(__name__)


class FinderError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class DatasetUnavailableError(FinderError):
    def __init__(self, message: str = "Failed to load data"):
        super().__init__(message, status_code=500)


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(FinderError)
    async def handle_finder_error(_request: Request, exc: FinderError):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(_request: Request, exc: StarletteHTTPException):
        message = "Not found" if exc.status_code == 404 else exc.detail
        return JSONResponse(
            {"error": message},
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        # Runs outside the middleware stack, so the hardening headers are added here
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
            headers=SECURITY_HEADERS,
        )
