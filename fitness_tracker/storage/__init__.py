"""Storage port and its adapters."""

from .base import Storage, StorageError, StorageErrorKind, StorageResult
from .factory import build_storage
from .memory import InMemoryStorage
from .redis_storage import RedisStorage

__all__ = [
    "InMemoryStorage",
    "RedisStorage",
    "Storage",
    "StorageError",
    "StorageErrorKind",
    "StorageResult",
    "build_storage",
]
