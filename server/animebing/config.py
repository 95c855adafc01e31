"""Configuration settings for the AnimeBing server and browsing client."""

from pathlib import Path
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


def _find_env_file() -> str:
    """Find .env in the cwd or up to two parents (server/, server/animebing/)."""
    current = Path.cwd()
    for directory in (current, current.parent, current.parent.parent):
        candidate = directory / ".env"
        if candidate.exists():
            return str(candidate)
    return ".env"


class Settings(BaseSettings):
    """Application settings loaded from ANIMEBING_* environment variables."""

    # Server settings
    port: int = 3000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list[str] = ["*"]

    # Catalog storage; empty keeps everything in memory
    data_file: str = ""

    # Admin routes expect "Authorization: Bearer <admin_token>"
    admin_token: str = ""

    # Browsing client
    api_base: str = "http://localhost:3000/api"
    request_timeout: float = 10.0
    cache_ttl: float = 120.0  # 2 minutes
    search_debounce: float = 0.4
    default_page_size: int = 24
    full_scan_limit: Optional[int] = None

    class Config:
        env_prefix = "ANIMEBING_"
        env_file = _find_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def data_path(self) -> Optional[Path]:
        """Get the catalog data file as a Path, if persistence is enabled."""
        if not self.data_file:
            return None
        return Path(self.data_file).expanduser()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
