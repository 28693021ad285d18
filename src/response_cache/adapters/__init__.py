"""Framework adapters for the response cache.

The adapters convert framework-specific request and response objects to
and from the middleware's internal representation:

- asgi.py: ASGI middleware for FastAPI, Starlette, etc.
"""

from response_cache.adapters.asgi import ASGIResponseCacheMiddleware

__all__ = ["ASGIResponseCacheMiddleware"]
