"""FastAPI dependencies shared by the routers."""

import secrets
from typing import Optional
from urllib.parse import urlparse

from fastapi import Header, HTTPException, Request

from .config import Settings
from .services.cache import Cache
from .services.dataset import DatasetLoader


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_cache(request: Request) -> Cache:
    return request.app.state.cache


def get_dataset(request: Request) -> DatasetLoader:
    return request.app.state.dataset


def _hostname(value: str) -> Optional[str]:
    try:
        return urlparse(value).hostname
    except ValueError:
        return None


def is_allowed_host(host: Optional[str], allowed_domains: list[str]) -> bool:
    """True if ``host`` equals an allowed domain or is a subdomain of one."""
    if not host:
        return False
    host = host.lower()
    for domain in allowed_domains:
        domain = domain.lower().lstrip(".")
        if host == domain or host.endswith("." + domain):
            return True
    return False


def require_allowed_origin(request: Request) -> None:
    """Reject requests whose Origin (or Referer) points outside the allowed domains."""
    settings = get_app_settings(request)
    if not settings.allowed_domains:
        return

    source = request.headers.get("Origin") or request.headers.get("Referer")
    if not source:
        if settings.require_referer:
            raise HTTPException(status_code=403, detail="Access denied")
        return

    if not is_allowed_host(_hostname(source), settings.allowed_domains):
        raise HTTPException(status_code=403, detail="Access denied")


def require_admin(
    request: Request,
    x_admin_token: Optional[str] = Header(default=None),
) -> None:
    """Guard admin endpoints when an admin token is configured."""
    expected = get_app_settings(request).admin_token
    if not expected:
        return
    if not x_admin_token or not secrets.compare_digest(x_admin_token.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Unauthorized")
