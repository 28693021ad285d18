"""Unit tests for the framework-agnostic response cache middleware."""

import asyncio

import pytest

from response_cache.config import ResponseCacheConfig
from response_cache.core.capture import CapturedResponse
from response_cache.core.middleware import Request, ResponseCacheMiddleware
from response_cache.keys import build_cache_key
from response_cache.models import StoredResponse
from response_cache.storage.memory import MemoryCache


class CountingHandler:
    """Handler returning a numbered response on each call."""

    def __init__(self, status: int = 200, headers: dict[str, str] | None = None) -> None:
        self.calls = 0
        self.status = status
        self.headers = headers or {"content-type": "text/plain"}

    async def __call__(self, request: Request) -> CapturedResponse:
        self.calls += 1
        return CapturedResponse(
            status=self.status,
            headers=dict(self.headers),
            body=f"response {self.calls}".encode(),
        )


class HookRecorder:
    """Records the URLs passed to each observation hook."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def hook(self, name: str):
        return lambda url: self.events.append((name, url))


@pytest.fixture
def hooks() -> HookRecorder:
    return HookRecorder()


def make_middleware(cache, hooks=None, **kwargs) -> ResponseCacheMiddleware:
    config = kwargs.pop("config", ResponseCacheConfig())
    if hooks is not None:
        kwargs.setdefault("on_miss", hooks.hook("miss"))
        kwargs.setdefault("on_hit", hooks.hook("hit"))
        kwargs.setdefault("on_store", hooks.hook("store"))
    return ResponseCacheMiddleware(cache, config, **kwargs)


def test_request_url() -> None:
    assert Request("GET", "/items").url == "/items"
    assert Request("GET", "/items", "page=2").url == "/items?page=2"


@pytest.mark.asyncio
async def test_miss_then_hit(hooks) -> None:
    cache = MemoryCache()
    middleware = make_middleware(cache, hooks)
    handler = CountingHandler()

    first = await middleware.process(Request("GET", "/items"), handler)
    second = await middleware.process(Request("GET", "/items"), handler)

    assert handler.calls == 1
    assert first.body == second.body == b"response 1"
    assert first.headers["X-Cache"] == "MISS"
    assert second.headers["X-Cache"] == "HIT"
    assert hooks.events == [("miss", "/items"), ("store", "/items"), ("hit", "/items")]
    cache.clear()


@pytest.mark.asyncio
async def test_entry_stored_under_derived_key() -> None:
    cache = MemoryCache()
    config = ResponseCacheConfig(key_prefix="api_")
    middleware = make_middleware(cache, config=config)

    await middleware.process(Request("GET", "/items", "page=2"), CountingHandler())

    key = build_cache_key("/items?page=2", "api_")
    assert cache.has(key)
    assert isinstance(cache.get(key, []), StoredResponse)
    cache.clear()


@pytest.mark.asyncio
async def test_query_string_separates_entries() -> None:
    cache = MemoryCache()
    middleware = make_middleware(cache)
    handler = CountingHandler()

    await middleware.process(Request("GET", "/items", "page=1"), handler)
    await middleware.process(Request("GET", "/items", "page=2"), handler)

    assert handler.calls == 2
    cache.clear()


@pytest.mark.asyncio
async def test_head_and_get_use_separate_entries() -> None:
    cache = MemoryCache()
    middleware = make_middleware(cache)
    handler = CountingHandler()

    await middleware.process(Request("HEAD", "/items"), handler)
    response = await middleware.process(Request("GET", "/items"), handler)

    assert handler.calls == 2
    assert response.headers["X-Cache"] == "MISS"
    assert cache.has(build_cache_key("HEAD /items"))
    assert cache.has(build_cache_key("/items"))
    cache.clear()


@pytest.mark.asyncio
async def test_dependency_change_forces_recompute(hooks) -> None:
    cache = MemoryCache()
    version = {"value": 1}
    middleware = make_middleware(cache, hooks, depends_on=lambda: [version["value"]])
    handler = CountingHandler()

    await middleware.process(Request("GET", "/items"), handler)
    version["value"] = 2
    changed = await middleware.process(Request("GET", "/items"), handler)
    again = await middleware.process(Request("GET", "/items"), handler)

    assert handler.calls == 2
    assert changed.headers["X-Cache"] == "MISS"
    assert again.headers["X-Cache"] == "HIT"
    assert again.body == b"response 2"
    cache.clear()


@pytest.mark.asyncio
async def test_async_depends_on_called_once_per_request() -> None:
    cache = MemoryCache()
    calls = []

    async def depends_on():
        calls.append(1)
        return ["v1"]

    middleware = make_middleware(cache, depends_on=depends_on)
    handler = CountingHandler()

    await middleware.process(Request("GET", "/items"), handler)
    await middleware.process(Request("GET", "/items"), handler)

    assert len(calls) == 2
    assert handler.calls == 1
    cache.clear()


@pytest.mark.asyncio
async def test_ttl_expiry_forces_recompute(clock) -> None:
    cache = MemoryCache(clock=clock)
    middleware = make_middleware(cache, config=ResponseCacheConfig(default_ttl_ms=1000))
    handler = CountingHandler()

    await middleware.process(Request("GET", "/items"), handler)
    clock.advance(0.5)
    await middleware.process(Request("GET", "/items"), handler)
    clock.advance(1.0)
    await middleware.process(Request("GET", "/items"), handler)

    assert handler.calls == 2
    cache.clear()


@pytest.mark.asyncio
async def test_zero_ttl_schedules_nothing() -> None:
    cache = MemoryCache()
    middleware = make_middleware(cache, config=ResponseCacheConfig(default_ttl_ms=0))

    await middleware.process(Request("GET", "/items"), CountingHandler())

    entry = cache._entries[build_cache_key("/items")]
    assert entry.expires_at is None
    assert entry.timer is None


@pytest.mark.asyncio
async def test_expiry_notifies_user_callback() -> None:
    cache = MemoryCache()
    expired = []
    middleware = make_middleware(
        cache,
        config=ResponseCacheConfig(default_ttl_ms=20),
        on_expire=lambda key, value: expired.append((key, value)),
    )

    await middleware.process(Request("GET", "/items"), CountingHandler())
    await asyncio.sleep(0.1)

    assert len(expired) == 1
    key, value = expired[0]
    assert key == build_cache_key("/items")
    assert value.get_body_bytes() == b"response 1"
    assert cache.has(key) is False


@pytest.mark.asyncio
async def test_uncached_method_bypasses(hooks) -> None:
    cache = MemoryCache()
    middleware = make_middleware(cache, hooks)
    handler = CountingHandler()

    response = await middleware.process(Request("POST", "/items"), handler)
    await middleware.process(Request("POST", "/items"), handler)

    assert handler.calls == 2
    assert "X-Cache" not in response.headers
    assert hooks.events == []
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_method_match_is_case_insensitive() -> None:
    cache = MemoryCache()
    middleware = make_middleware(cache)
    handler = CountingHandler()

    await middleware.process(Request("get", "/items"), handler)
    await middleware.process(Request("get", "/items"), handler)

    assert handler.calls == 1
    cache.clear()


@pytest.mark.asyncio
async def test_error_responses_not_stored(hooks) -> None:
    cache = MemoryCache()
    middleware = make_middleware(cache, hooks)
    handler = CountingHandler(status=500)

    first = await middleware.process(Request("GET", "/items"), handler)
    await middleware.process(Request("GET", "/items"), handler)

    assert handler.calls == 2
    assert first.headers["X-Cache"] == "MISS"
    assert ("store", "/items") not in hooks.events


@pytest.mark.asyncio
async def test_error_responses_stored_when_enabled() -> None:
    cache = MemoryCache()
    middleware = make_middleware(cache, config=ResponseCacheConfig(cache_error_responses=True))
    handler = CountingHandler(status=404)

    await middleware.process(Request("GET", "/missing"), handler)
    second = await middleware.process(Request("GET", "/missing"), handler)

    assert handler.calls == 1
    assert second.status == 404
    cache.clear()


@pytest.mark.asyncio
async def test_no_store_responses_not_stored() -> None:
    cache = MemoryCache()
    middleware = make_middleware(cache)
    handler = CountingHandler(headers={"Cache-Control": "no-store"})

    await middleware.process(Request("GET", "/items"), handler)
    await middleware.process(Request("GET", "/items"), handler)

    assert handler.calls == 2


@pytest.mark.asyncio
async def test_extra_volatile_headers_not_replayed() -> None:
    cache = MemoryCache()
    config = ResponseCacheConfig(extra_volatile_headers=["X-Request-ID"])
    middleware = make_middleware(cache, config=config)
    handler = CountingHandler(headers={"content-type": "text/plain", "x-request-id": "abc"})

    first = await middleware.process(Request("GET", "/items"), handler)
    second = await middleware.process(Request("GET", "/items"), handler)

    assert first.headers["x-request-id"] == "abc"
    assert "x-request-id" not in second.headers
    assert second.headers["content-type"] == "text/plain"
    cache.clear()


@pytest.mark.asyncio
async def test_async_hooks_are_awaited() -> None:
    cache = MemoryCache()
    events: list[tuple[str, str]] = []

    def async_hook(name: str):
        async def hook(url: str) -> None:
            await asyncio.sleep(0)
            events.append((name, url))

        return hook

    middleware = make_middleware(
        cache,
        on_miss=async_hook("miss"),
        on_hit=async_hook("hit"),
        on_store=async_hook("store"),
    )
    handler = CountingHandler()

    await middleware.process(Request("GET", "/items"), handler)
    await middleware.process(Request("GET", "/items"), handler)

    assert events == [("miss", "/items"), ("store", "/items"), ("hit", "/items")]
    cache.clear()


def test_is_cached_method() -> None:
    middleware = make_middleware(MemoryCache(), config=ResponseCacheConfig(cached_methods=["GET"]))

    assert middleware.is_cached_method("GET") is True
    assert middleware.is_cached_method("get") is True
    assert middleware.is_cached_method("POST") is False
