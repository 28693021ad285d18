"""Core logic for the response cache.

This package contains the framework-agnostic parts of the cache:
- Dependencies: snapshot comparison and resolution of ``depends_on``
- Capture: response serialization to and from cacheable records
- Middleware: the lookup, produce and store flow with observation hooks
- Cleanup: periodic sweep of expired entries

Adapters in ``response_cache.adapters`` wrap the middleware for specific
web frameworks.
"""

from response_cache.core.capture import CapturedResponse, capture_response, replay_response
from response_cache.core.dependencies import resolve_dependencies, snapshots_equal

__all__ = [
    "CapturedResponse",
    "capture_response",
    "replay_response",
    "resolve_dependencies",
    "snapshots_equal",
]
