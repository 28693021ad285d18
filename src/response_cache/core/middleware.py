"""Framework-agnostic core middleware for response caching.

This module orchestrates a cached request:

1. Skip methods that are not cached
2. Derive the cache key from the request path and query string, plus the
   method for anything other than GET
3. Resolve the dependency snapshot once for the request
4. Replay a cached response on a hit
5. On a miss, run the handler and store a cacheable result with the
   configured TTL, an expiry handler and the snapshot used for the lookup

Observation hooks receive the request URL on a miss, on a hit and after a
response was stored. They may be sync or async; awaitable results are
awaited and other return values are ignored.

Examples:
    Using the middleware directly::

        from response_cache.config import ResponseCacheConfig
        from response_cache.core.capture import CapturedResponse
        from response_cache.core.middleware import Request, ResponseCacheMiddleware
        from response_cache.storage.memory import MemoryCache

        middleware = ResponseCacheMiddleware(
            MemoryCache(),
            ResponseCacheConfig(default_ttl_ms=60000),
            depends_on=lambda: [catalog.version],
        )

        async def handler(request):
            return CapturedResponse(status=200, headers={}, body=b"Success")

        result = await middleware.process(request, handler)
"""

import inspect
from collections.abc import Awaitable, Callable, Hashable
from typing import Any

from response_cache.config import ResponseCacheConfig
from response_cache.core.capture import (
    CapturedResponse,
    capture_response,
    is_cacheable,
    replay_response,
)
from response_cache.core.dependencies import DependsOn, resolve_dependencies
from response_cache.keys import build_cache_key
from response_cache.observability.logging import get_logger
from response_cache.observability.metrics import (
    record_expiration,
    record_lookup,
    record_store,
)
from response_cache.storage.base import CacheStore, ExpiryCallback
from response_cache.utils.headers import add_cache_status_header

logger = get_logger(__name__)

ObservationHook = Callable[[str], Any]


class Request:
    """Abstract request representation.

    Framework adapters convert their request objects into this format.

    Attributes:
        method: HTTP method (GET, POST, etc.)
        path: URL path
        query_string: Query string without leading '?'
        headers: Request headers as dict
    """

    def __init__(
        self,
        method: str,
        path: str,
        query_string: str = "",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.method = method
        self.path = path
        self.query_string = query_string
        self.headers = headers or {}

    @property
    def url(self) -> str:
        """Path plus query string, the string cache keys are derived from."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path


class ResponseCacheMiddleware:
    """Framework-agnostic response cache middleware.

    Attributes:
        cache: Store holding cached responses
        config: Configuration object
        depends_on: Callable producing the dependency snapshot per request
        on_expire: User callback for expiry notifications
        on_miss: Hook called with the URL on a cache miss
        on_hit: Hook called with the URL when a cached response is served
        on_store: Hook called with the URL after a response was stored
    """

    def __init__(
        self,
        cache: CacheStore,
        config: ResponseCacheConfig | None = None,
        depends_on: DependsOn | None = None,
        on_expire: ExpiryCallback | None = None,
        on_miss: ObservationHook | None = None,
        on_hit: ObservationHook | None = None,
        on_store: ObservationHook | None = None,
    ) -> None:
        self.cache = cache
        self.config = config or ResponseCacheConfig()
        self.depends_on = depends_on
        self.on_expire = on_expire
        self.on_miss = on_miss
        self.on_hit = on_hit
        self.on_store = on_store

    def is_cached_method(self, method: str) -> bool:
        """Return True if requests with this HTTP method go through the cache."""
        return method.upper() in self.config.cached_methods

    async def process(
        self,
        request: Request,
        handler: Callable[[Request], Awaitable[CapturedResponse]],
    ) -> CapturedResponse:
        """Serve a request from the cache or produce and store its response.

        Args:
            request: The incoming request
            handler: Async function producing the response on a miss

        Returns:
            The replayed or freshly produced response, marked with X-Cache
        """
        if not self.is_cached_method(request.method):
            record_lookup("bypass")
            return await handler(request)

        url = request.url
        key = build_cache_key(self._identifier(request), self.config.key_prefix)
        snapshot = await resolve_dependencies(self.depends_on)

        stored = self.cache.get(key, snapshot)
        if stored is not None:
            record_lookup("hit")
            logger.debug("cache.hit", key=key, url=url)
            await self._notify(self.on_hit, url)
            return replay_response(stored)

        record_lookup("miss")
        logger.debug("cache.miss", key=key, url=url)
        await self._notify(self.on_miss, url)

        response = await handler(request)

        if is_cacheable(response, self.config.cache_error_responses):
            self.cache.set(
                key,
                capture_response(response, self.config.extra_volatile_headers),
                self.config.default_ttl_ms,
                self._handle_expiry,
                snapshot,
            )
            record_store()
            logger.info("cache.stored", key=key, url=url, status=response.status)
            await self._notify(self.on_store, url)

        response.headers = add_cache_status_header(response.headers, hit=False)
        return response

    @staticmethod
    def _identifier(request: Request) -> str:
        # GET is keyed by URL alone; other methods must not share its entries
        method = request.method.upper()
        if method == "GET":
            return request.url
        return f"{method} {request.url}"

    def _handle_expiry(self, key: Hashable, value: Any) -> None:
        record_expiration()
        logger.info("cache.expired", key=key)
        if self.on_expire is not None:
            self.on_expire(key, value)

    @staticmethod
    async def _notify(hook: ObservationHook | None, url: str) -> None:
        if hook is None:
            return
        result = hook(url)
        if inspect.isawaitable(result):
            await result
