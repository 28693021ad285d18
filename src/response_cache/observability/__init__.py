"""Observability utilities for the response cache.

This package provides monitoring and debugging capabilities:
- Prometheus metrics for hit rates, stores, expiries and sweeps
- Structured logging with contextual information
"""

from response_cache.observability.logging import configure_logging, get_logger
from response_cache.observability.metrics import (
    record_cleanup,
    record_expiration,
    record_lookup,
    record_store,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "record_lookup",
    "record_store",
    "record_expiration",
    "record_cleanup",
]
