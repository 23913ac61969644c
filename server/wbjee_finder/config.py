"""Configuration settings for the WBJEE Finder server."""

from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings

# Hardening headers sent on every response
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
}


def _find_env_file() -> str:
    """Find .env file - check current dir, then parent (repo root)."""
    current = Path.cwd()

    # Check current directory
    if (current / ".env").exists():
        return str(current / ".env")

    # Check parent directory (when running from server/)
    if (current.parent / ".env").exists():
        return str(current.parent / ".env")

    # Default to current directory
    return ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server settings
    port: int = 3000
    host: str = "0.0.0.0"
    debug: bool = False
    environment: str = "local"

    # Dataset and static assets
    data_file: str = "wbjee_orcr_data.json"
    public_dir: str = "public"

    # Cache (in seconds)
    cache_ttl: int = 1800  # 30 minutes
    cache_sweep_interval: int = 600  # 10 minutes

    # Rate limiting for /api/
    rate_limit_window: int = 900  # 15 minutes
    rate_limit_max: int = 100
    trust_proxy: bool = False

    # Access control
    cors_origins: list[str] = ["http://localhost:3000", "https://yourdomain.com"]
    allowed_domains: list[str] = ["localhost", "127.0.0.1", "yourdomain.com"]
    require_referer: bool = False
    admin_token: str = ""

    # Compression
    gzip_minimum_size: int = 1024

    class Config:
        env_file = _find_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def data_path(self) -> Path:
        """Get dataset file path."""
        return Path(self.data_file)

    @property
    def public_path(self) -> Path:
        """Get static assets directory path."""
        return Path(self.public_dir)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
