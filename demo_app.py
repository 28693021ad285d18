"""Demo FastAPI application with the response cache middleware.

Run with: python demo_app.py
Then try:
    curl -i localhost:8000/api/products          # X-Cache: MISS
    curl -i localhost:8000/api/products          # X-Cache: HIT
    curl -X POST localhost:8000/api/products/bump
    curl -i localhost:8000/api/products          # X-Cache: MISS (catalog changed)
"""

from contextlib import asynccontextmanager
from datetime import UTC, datetime

import uvicorn
from fastapi import FastAPI

from response_cache.adapters.asgi import ASGIResponseCacheMiddleware
from response_cache.config import ResponseCacheConfig
from response_cache.core.cleanup import start_cleanup_task, stop_cleanup_task
from response_cache.observability.logging import configure_logging, get_logger
from response_cache.storage.memory import MemoryCache

configure_logging(level="DEBUG", json_output=False)
logger = get_logger("demo_app")

cache = MemoryCache()
config = ResponseCacheConfig(
    cached_methods=["GET"],
    default_ttl_ms=30000,  # 30 seconds
    sweep_interval_seconds=60,
)

# Bumped by POST /api/products/bump; cached listings depend on it
catalog = {"revision": 1}


@asynccontextmanager
async def lifespan(_app: FastAPI):
    task = await start_cleanup_task(cache, interval_seconds=config.sweep_interval_seconds)
    yield
    await stop_cleanup_task(task)
    cache.clear()


app = FastAPI(
    title="Response Cache Demo",
    description="Demo API showing cached responses with dependency invalidation",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    ASGIResponseCacheMiddleware,
    cache=cache,
    config=config,
    depends_on=lambda: [catalog["revision"]],
    on_expire=lambda key, value: logger.info("demo.cache_removed", key=key),
    on_hit=lambda url: logger.info("demo.hit", url=url),
    on_miss=lambda url: logger.info("demo.miss", url=url),
    on_store=lambda url: logger.info("demo.stored", url=url),
)


@app.get("/api/products")
async def list_products():
    """List products. Cached until the TTL elapses or the catalog changes."""
    return {
        "revision": catalog["revision"],
        "generated_at": datetime.now(UTC).isoformat(),
        "products": [
            {"id": "prod_1", "name": "Widget", "price": 9.99},
            {"id": "prod_2", "name": "Gadget", "price": 24.5},
        ],
    }


@app.post("/api/products/bump")
async def bump_catalog():
    """Change the catalog revision, invalidating cached listings."""
    catalog["revision"] += 1
    return {"revision": catalog["revision"]}


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
