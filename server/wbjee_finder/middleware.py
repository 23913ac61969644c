"""HTTP middleware: security headers and per-IP rate limiting."""

import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from .config import SECURITY_HEADERS
from .services.rate_limiter import RateLimiter, RateLimitResult

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


def get_client_ip(request: Request, trust_proxy: bool = False) -> str:
    """Client address, optionally taken from the first X-Forwarded-For hop."""
    if trust_proxy:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach the standard hardening headers to every response."""

    def __init__(self, app, hsts: bool = False):
        super().__init__(app)
        self.hsts = hsts

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        if self.hsts:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject clients that exceed the limiter's budget on paths under ``prefix``.

    Responds with HTTP 429 and a Retry-After header once the budget is spent.
    """

    def __init__(self, app, limiter: RateLimiter, prefix: str = "/api/", trust_proxy: bool = False):
        super().__init__(app)
        self.limiter = limiter
        self.prefix = prefix
        self.trust_proxy = trust_proxy

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not request.url.path.startswith(self.prefix):
            return await call_next(request)

        client_ip = get_client_ip(request, self.trust_proxy)
        result = self.limiter.check(client_ip)

        if not result.allowed:
            logger.warning("Rate limit exceeded for %s on %s", client_ip, request.url.path)
            response = JSONResponse({"error": RATE_LIMIT_MESSAGE}, status_code=429)
            response.headers["Retry-After"] = str(result.retry_after)
            self._add_rate_limit_headers(response, result)
            return response

        response = await call_next(request)
        self._add_rate_limit_headers(response, result)
        return response

    @staticmethod
    def _add_rate_limit_headers(response: Response, result: RateLimitResult) -> None:
        response.headers["RateLimit-Limit"] = str(result.limit)
        response.headers["RateLimit-Remaining"] = str(result.remaining)
        response.headers["RateLimit-Reset"] = str(result.reset_after)
