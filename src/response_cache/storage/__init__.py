"""Cache stores for the response cache."""

from response_cache.storage.base import CacheStore, ExpiryCallback
from response_cache.storage.memory import MemoryCache

__all__ = ["CacheStore", "ExpiryCallback", "MemoryCache"]
