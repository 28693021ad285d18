"""Cache store protocol for the response cache.

This module defines the interface the middleware relies on. The store is
an explicitly constructed object passed to the middleware, so tests and
applications can each hold their own isolated instance.

Contract:
    1. **Lazy invalidation**: get() checks the dependency snapshot first and
       the TTL second, deleting the entry when either check fails. Reads
       are therefore not side-effect-free.

    2. **Whole-entry writes**: set() replaces any previous entry for the
       key and cancels its pending expiry notification.

    3. **Dependency tracking outlives values**: the last snapshot seen for
       a key is kept after its entry is evicted, and dropped only by
       remove() or clear().

    4. **Non-suspending operations**: get, set, remove and has run to
       completion without awaiting, so they cannot interleave with each
       other on one event loop.
"""

from collections.abc import Callable, Hashable
from typing import Any, Protocol, runtime_checkable

ExpiryCallback = Callable[[Any, Any], None]


@runtime_checkable
class CacheStore(Protocol):
    """Protocol defining the interface for response cache stores."""

    def get(self, key: Hashable, dependency_snapshot: Any = None) -> Any | None:
        """Return the cached value, or None on a miss.

        Args:
            key: The cache key.
            dependency_snapshot: Dependency values for the current request.
        """
        ...

    def set(
        self,
        key: Hashable,
        value: Any,
        ttl_ms: float | None = None,
        on_expire: ExpiryCallback | None = None,
        dependency_snapshot: Any = None,
    ) -> None:
        """Store a value, replacing any previous entry for the key.

        Args:
            key: The cache key.
            value: The value to cache.
            ttl_ms: Time-to-live in milliseconds. None or <= 0 never expires.
            on_expire: Called with (key, value) when the TTL elapses.
            dependency_snapshot: Dependency values the value was produced for.
        """
        ...

    def remove(self, key: Hashable) -> None:
        """Delete the entry and its dependency record."""
        ...

    def has(self, key: Hashable) -> bool:
        """Return True if an entry exists, without TTL or dependency checks."""
        ...

    def purge_expired(self) -> int:
        """Remove expired entries and return how many were removed."""
        ...

    def __len__(self) -> int: ...
