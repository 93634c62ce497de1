from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Runtime configuration values exposed to the service components."""

    app_name: str = "fitness-tracker"
    version: str = "0.1.0"
    http_host: str = os.getenv("HTTP_HOST", "0.0.0.0")
    http_port: int = int(os.getenv("HTTP_PORT", "8000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    storage_backend: str = os.getenv("STORAGE_BACKEND", "memory").lower()
    redis_url: str = os.getenv("REDIS_URL", "")
    redis_key_prefix: str = os.getenv("REDIS_KEY_PREFIX", "fitness")
    weekly_window_days: int = int(os.getenv("WEEKLY_WINDOW_DAYS", "7"))
    monthly_window_days: int = int(os.getenv("MONTHLY_WINDOW_DAYS", "30"))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached Settings instance for the running process."""
    return Settings()
