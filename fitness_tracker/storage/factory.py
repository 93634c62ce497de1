"""Select the storage backend configured for the running process."""

from __future__ import annotations

import logging

from redis.asyncio import Redis

from ..config import Settings
from .base import Storage
from .memory import InMemoryStorage
from .redis_storage import RedisStorage

logger = logging.getLogger(__name__)


async def build_storage(settings: Settings) -> Storage:
    """Instantiate the configured storage backend, falling back to memory when Redis is unreachable."""
    if settings.storage_backend == "redis" and settings.redis_url:
        client: Redis | None = None
        try:
            client = Redis.from_url(settings.redis_url)
            # ensure connectivity early to fail fast and fall back
            await client.ping()
            logger.info("storage configured for redis backend at %s", settings.redis_url)
            return RedisStorage(client, key_prefix=settings.redis_key_prefix)
        except Exception as exc:
            logger.warning("redis storage unavailable, falling back to in-memory: %s", exc)
            if client is not None:
                await client.aclose()

    logger.info("storage using in-memory backend")
    return InMemoryStorage()
