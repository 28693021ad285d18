"""ASGI middleware adapter for FastAPI and Starlette applications.

Examples:
    FastAPI integration::

        from fastapi import FastAPI

        from response_cache.adapters.asgi import ASGIResponseCacheMiddleware
        from response_cache.config import ResponseCacheConfig
        from response_cache.storage.memory import MemoryCache

        app = FastAPI()
        cache = MemoryCache()

        app.add_middleware(
            ASGIResponseCacheMiddleware,
            cache=cache,
            config=ResponseCacheConfig(default_ttl_ms=60000),
            depends_on=lambda: [inventory.revision],
            on_hit=lambda url: print(f"served {url} from cache"),
        )

        @app.get("/api/products")
        async def list_products():
            return await load_products()

    Starlette integration::

        from starlette.applications import Starlette
        from starlette.middleware import Middleware

        middleware = [
            Middleware(ASGIResponseCacheMiddleware, cache=cache),
        ]

        app = Starlette(middleware=middleware)
"""

from collections.abc import Awaitable, Callable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request as StarletteRequest
from starlette.responses import Response

from response_cache.config import ResponseCacheConfig
from response_cache.core.capture import CapturedResponse
from response_cache.core.dependencies import DependsOn
from response_cache.core.middleware import ObservationHook, Request, ResponseCacheMiddleware
from response_cache.observability.metrics import record_lookup
from response_cache.storage.base import CacheStore, ExpiryCallback
from response_cache.utils.headers import CACHE_STATUS_HEADER


class ASGIResponseCacheMiddleware(BaseHTTPMiddleware):
    """ASGI middleware serving repeated requests from a response cache.

    Attributes:
        cache: Store holding cached responses
        config: Configuration object
        middleware: Core middleware instance
    """

    def __init__(
        self,
        app: Any,
        cache: CacheStore,
        config: ResponseCacheConfig | None = None,
        depends_on: DependsOn | None = None,
        on_expire: ExpiryCallback | None = None,
        on_miss: ObservationHook | None = None,
        on_hit: ObservationHook | None = None,
        on_store: ObservationHook | None = None,
    ) -> None:
        """Initialize the ASGI middleware.

        Args:
            app: The ASGI application
            cache: Store holding cached responses
            config: Configuration object (uses defaults if not provided)
            depends_on: Callable producing the dependency snapshot per request
            on_expire: Called with (key, stored response) when an entry expires
            on_miss: Called with the request URL on a cache miss
            on_hit: Called with the request URL when serving from cache
            on_store: Called with the request URL after storing a response
        """
        super().__init__(app)
        self.cache = cache
        self.config = config or ResponseCacheConfig()
        self.middleware = ResponseCacheMiddleware(
            cache,
            self.config,
            depends_on=depends_on,
            on_expire=on_expire,
            on_miss=on_miss,
            on_hit=on_hit,
            on_store=on_store,
        )

    async def dispatch(
        self,
        request: StarletteRequest,
        call_next: Callable[[StarletteRequest], Awaitable[Response]],
    ) -> Response:
        """Process an ASGI request through the response cache.

        Requests with uncached methods are passed through untouched. On a
        miss the downstream response keeps its raw header list, so repeated
        headers such as Set-Cookie survive; only the stored copy is
        reduced to a dict.

        Args:
            request: The Starlette request object
            call_next: Function to call the next middleware/handler

        Returns:
            Starlette Response object
        """
        if not self.middleware.is_cached_method(request.method):
            record_lookup("bypass")
            return await call_next(request)

        internal_request = self._convert_request(request)
        upstream: Response | None = None

        async def handler(_req: Request) -> CapturedResponse:
            nonlocal upstream
            response = await call_next(request)
            upstream = response

            body = b""
            if hasattr(response, "body_iterator"):
                async for chunk in response.body_iterator:
                    if isinstance(chunk, str):
                        body += chunk.encode(response.charset)
                    else:
                        body += bytes(chunk)
            else:
                body = bytes(getattr(response, "body", b""))

            return CapturedResponse(
                status=response.status_code,
                headers=dict(response.headers),
                body=body,
            )

        result = await self.middleware.process(internal_request, handler)

        if upstream is None:
            return self._convert_response(result)
        return self._rebuild_response(result, upstream)

    def _convert_request(self, request: StarletteRequest) -> Request:
        """Convert Starlette request to internal Request format.

        The body is not read: cache keys depend on the URL only.
        """
        return Request(
            method=request.method,
            path=request.url.path,
            query_string=request.url.query or "",
            headers=dict(request.headers),
        )

    def _convert_response(self, response: CapturedResponse) -> Response:
        """Convert internal CapturedResponse to Starlette Response."""
        return Response(
            content=response.body,
            status_code=response.status,
            headers=response.headers,
        )

    def _rebuild_response(self, response: CapturedResponse, upstream: Response) -> Response:
        """Build the outgoing response from the upstream raw headers."""
        rebuilt = Response(content=response.body, status_code=response.status)
        rebuilt.raw_headers = list(upstream.raw_headers)
        rebuilt.headers[CACHE_STATUS_HEADER] = response.headers[CACHE_STATUS_HEADER]
        return rebuilt
