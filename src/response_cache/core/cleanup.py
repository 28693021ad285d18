"""Periodic sweep of expired, timer-less cache entries.

MemoryCache notices expiry only when a key is read or when an expiry timer
fires. Entries stored without an expiry callback, for URLs that are never
requested again, would stay in memory; the sweeper reclaims them by calling
purge_expired() every ``interval_seconds``.

Run it from an application lifespan::

    task = await start_cleanup_task(cache, interval_seconds=config.sweep_interval_seconds)
    yield
    await stop_cleanup_task(task)
"""

import asyncio
import contextlib

from response_cache.observability.logging import get_logger
from response_cache.observability.metrics import record_cleanup
from response_cache.storage.base import CacheStore

logger = get_logger(__name__)

STOP_TIMEOUT_SECONDS = 5.0


def sweep_once(cache: CacheStore) -> int:
    """Purge expired entries once and report the result.

    A failing purge is logged and counts as zero removals.
    """
    try:
        removed = cache.purge_expired()
    except Exception as e:
        logger.error("cleanup.failed", error=str(e), error_type=type(e).__name__)
        return 0

    remaining = len(cache)
    record_cleanup(removed, remaining)
    log = logger.info if removed else logger.debug
    log("cleanup.completed", records_removed=removed, entries_remaining=remaining)
    return removed


async def cleanup_loop(
    cache: CacheStore,
    interval_seconds: float = 300,
    stop_event: asyncio.Event | None = None,
) -> None:
    """Sweep ``cache`` every ``interval_seconds`` until ``stop_event`` is set."""
    if stop_event is None:
        stop_event = asyncio.Event()

    logger.info("cleanup.started", interval_seconds=interval_seconds)

    while not stop_event.is_set():
        sweep_once(cache)
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(stop_event.wait(), timeout=interval_seconds)

    logger.info("cleanup.stopped")


async def start_cleanup_task(
    cache: CacheStore,
    interval_seconds: float = 300,
) -> asyncio.Task[None]:
    """Run cleanup_loop() as a background task.

    The task carries its stop event, which stop_cleanup_task() sets.
    """
    stop_event = asyncio.Event()
    task = asyncio.create_task(cleanup_loop(cache, interval_seconds, stop_event))
    task._stop_event = stop_event  # type: ignore[attr-defined]
    return task


async def stop_cleanup_task(task: asyncio.Task[None]) -> None:
    """Signal the sweeper to stop and wait for it, cancelling it on timeout."""
    stop_event: asyncio.Event | None = getattr(task, "_stop_event", None)
    if stop_event is not None:
        stop_event.set()

    try:
        await asyncio.wait_for(task, timeout=STOP_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.warning("cleanup.stop_timeout", timeout_seconds=STOP_TIMEOUT_SECONDS)
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
