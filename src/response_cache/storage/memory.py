"""In-memory cache store with TTL expiry and dependency invalidation.

This module provides MemoryCache, the store behind the response cache
middleware. Each key holds at most one CacheEntry. A separate dependency
table remembers the last dependency snapshot seen for every key, so that
dependency tracking survives the eviction of the cached value itself.

Invalidation:
    - Dependency drift is detected lazily by get(). A snapshot that differs
      from the recorded one deletes the entry regardless of remaining TTL.
    - TTL expiry is detected lazily by get() as well. When an expiry
      callback is supplied to set(), a one-shot timer additionally
      delivers the callback and deletes the entry when the TTL elapses.

Timers:
    - Timers are asyncio.TimerHandle objects from loop.call_later() when an
      event loop is injected or running. Otherwise a daemon threading.Timer
      is started and the callback runs on its thread.
    - Overwrite, remove(), dependency invalidation, lazy TTL eviction and
      clear() cancel the pending timer of the entry they discard.
    - A firing timer acts only if its own entry is still installed.

Concurrency:
    All operations are synchronous and never await, so on a single event
    loop they cannot be interleaved. There is no internal locking.
    Thread-based expiry timers assume the cache is otherwise used from a
    single thread.

Examples:
    Basic usage::

        from response_cache.storage.memory import MemoryCache

        cache = MemoryCache()
        cache.set("c_1", {"n": 1}, ttl_ms=1000, dependency_snapshot=[1])

        cache.get("c_1", [1])   # {"n": 1}
        cache.get("c_1", [2])   # None, dependencies changed

    Expiry notifications::

        def on_expire(key, value):
            print(f"{key} expired")

        cache.set("c_2", "body", ttl_ms=500, on_expire=on_expire)
"""

import asyncio
import threading
import time
from collections.abc import Callable, Hashable
from typing import Any

from response_cache.core.dependencies import snapshots_equal
from response_cache.models import CacheEntry
from response_cache.observability.logging import get_logger
from response_cache.storage.base import ExpiryCallback

logger = get_logger(__name__)


class MemoryCache:
    """In-memory key/value cache with TTL and dependency invalidation.

    Attributes:
        _entries: Dictionary mapping keys to CacheEntry objects.
        _dependencies: Dictionary mapping keys to the last seen snapshot.
        _clock: Callable returning the current time in seconds.
        _loop: Event loop used for expiry timers, or None for the running loop
            (falling back to threading.Timer when no loop is running).
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """Initialize an empty cache.

        Args:
            clock: Time source in seconds used for TTL deadlines.
            loop: Event loop to schedule expiry timers on. Defaults to the
                loop running when set() is called, or to a timer thread
                when there is none.
        """
        self._entries: dict[Hashable, CacheEntry] = {}
        self._dependencies: dict[Hashable, Any] = {}
        self._clock = clock
        self._loop = loop

    def get(self, key: Hashable, dependency_snapshot: Any = None) -> Any | None:
        """Look up a value, evicting it if its dependencies changed or it expired.

        This read is not side-effect-free. A changed snapshot is recorded
        as the key's current snapshot and the entry is deleted; an expired
        entry is deleted.

        Args:
            key: The cache key.
            dependency_snapshot: Dependency values for the current request.

        Returns:
            The cached value, or None if absent, expired or invalidated.
        """
        stored_snapshot = self._dependencies.get(key)

        if stored_snapshot is not None and not snapshots_equal(
            stored_snapshot, dependency_snapshot
        ):
            self._dependencies[key] = dependency_snapshot
            if self._discard(key):
                logger.debug("cache.dependency_changed", key=key)
            return None

        entry = self._entries.get(key)
        if entry is not None and not entry.is_expired(self._clock()):
            return entry.value

        self._discard(key)
        return None

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
            ttl_ms: Time-to-live in milliseconds. None or <= 0 stores the
                value without expiry and without a timer.
            on_expire: Called with (key, value) when the TTL elapses, after
                which the entry is deleted. Ignored without a positive TTL.
            dependency_snapshot: Dependency values the value was produced
                for. Always recorded as the key's current snapshot.
        """
        if ttl_ms is not None and ttl_ms > 0:
            entry = CacheEntry(
                value=value,
                expires_at=self._clock() + ttl_ms / 1000.0,
                dependency_snapshot=dependency_snapshot,
                ttl_ms=ttl_ms,
            )
            if on_expire is not None:
                entry.timer = self._schedule(key, entry, ttl_ms, on_expire)
        else:
            entry = CacheEntry(value=value, dependency_snapshot=dependency_snapshot)

        previous = self._entries.get(key)
        if previous is not None:
            previous.cancel_timer()

        self._entries[key] = entry
        self._dependencies[key] = dependency_snapshot

    def remove(self, key: Hashable) -> None:
        """Delete the entry and its dependency record, cancelling any timer.

        Args:
            key: The cache key. Unknown keys are ignored.
        """
        self._discard(key)
        self._dependencies.pop(key, None)

    def has(self, key: Hashable) -> bool:
        """Return True if an entry exists for key.

        No TTL or dependency checks are performed.
        """
        return key in self._entries

    def purge_expired(self) -> int:
        """Remove expired entries that have no pending expiry timer.

        Entries with a timer are left for the timer, which delivers their
        notification. Dependency records are kept.

        Returns:
            The number of entries removed.
        """
        now = self._clock()
        expired_keys = [
            key
            for key, entry in self._entries.items()
            if entry.timer is None and entry.is_expired(now)
        ]

        for key in expired_keys:
            del self._entries[key]

        return len(expired_keys)

    def clear(self) -> None:
        """Cancel every pending timer and drop all entries and dependency records."""
        for entry in self._entries.values():
            entry.cancel_timer()
        self._entries.clear()
        self._dependencies.clear()

    def __len__(self) -> int:
        """Return the number of entries currently held."""
        return len(self._entries)

    def _discard(self, key: Hashable) -> bool:
        entry = self._entries.pop(key, None)
        if entry is None:
            return False
        entry.cancel_timer()
        return True

    def _schedule(
        self,
        key: Hashable,
        entry: CacheEntry,
        ttl_ms: float,
        on_expire: ExpiryCallback,
    ) -> asyncio.TimerHandle | threading.Timer:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None

        if loop is not None:
            return loop.call_later(ttl_ms / 1000.0, self._fire_expiry, key, entry, on_expire)

        timer = threading.Timer(
            ttl_ms / 1000.0, self._fire_expiry, args=(key, entry, on_expire)
        )
        timer.daemon = True
        timer.start()
        return timer

    def _fire_expiry(self, key: Hashable, entry: CacheEntry, on_expire: ExpiryCallback) -> None:
        # Only act on the entry this timer was scheduled for
        if self._entries.get(key) is not entry:
            return

        entry.timer = None
        try:
            on_expire(key, entry.value)
        except Exception as e:
            logger.error(
                "cache.expire_callback_failed",
                key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
        finally:
            if self._entries.get(key) is entry:
                del self._entries[key]
