"""
In-process response cache for Python web applications.

This package memoizes HTTP responses in memory, keyed by a hash of the
request URL, and invalidates them by time-to-live expiry or when a
caller-supplied dependency snapshot changes.
"""

from response_cache.adapters.asgi import ASGIResponseCacheMiddleware
from response_cache.config import ResponseCacheConfig
from response_cache.keys import build_cache_key, derive_key
from response_cache.storage.memory import MemoryCache

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ASGIResponseCacheMiddleware",
    "MemoryCache",
    "ResponseCacheConfig",
    "build_cache_key",
    "derive_key",
]
