"""Prometheus metrics for the response cache.

Metrics include:

- Lookup counters by result (hit, miss, bypass)
- Stored response and expiry notification counters
- Current entry count gauge
- Sweeper operation tracking

Examples:
    Recording a cache hit::

        from response_cache.observability.metrics import record_lookup

        record_lookup("hit")

    Recording a sweep::

        from response_cache.observability.metrics import record_cleanup

        record_cleanup(records_removed=3, entries_remaining=120)
"""

from prometheus_client import Counter, Gauge

# Labels: result (hit, miss, bypass)
lookups_total = Counter(
    "response_cache_lookups_total",
    "Total number of cache lookups performed by the response cache middleware",
    ["result"],
)

stores_total = Counter(
    "response_cache_stores_total",
    "Total number of responses written to the cache",
)

expirations_total = Counter(
    "response_cache_expirations_total",
    "Total number of expiry notifications delivered",
)

# Refreshed on every sweep
entries = Gauge(
    "response_cache_entries",
    "Number of entries held by the cache at the last sweep",
)

cleanup_operations = Counter(
    "response_cache_cleanup_operations_total",
    "Total number of sweep operations performed",
)

cleanup_records_removed = Counter(
    "response_cache_cleanup_records_removed_total",
    "Total number of expired entries removed by the sweeper",
)


def record_lookup(result: str) -> None:
    """Record a cache lookup.

    Args:
        result: The lookup result (hit, miss, bypass)
    """
    lookups_total.labels(result=result).inc()


def record_store() -> None:
    """Record a response written to the cache."""
    stores_total.inc()


def record_expiration() -> None:
    """Record a delivered expiry notification."""
    expirations_total.inc()


def record_cleanup(records_removed: int, entries_remaining: int) -> None:
    """Record a sweep operation.

    Args:
        records_removed: Number of expired entries removed
        entries_remaining: Number of entries left in the cache
    """
    cleanup_operations.inc()
    cleanup_records_removed.inc(records_removed)
    entries.set(entries_remaining)
