"""Core type definitions for the response cache.

This module provides the data structures held by the cache store and the
serialized form of HTTP responses that the middleware caches.

Examples:
    Creating a stored response::

        import base64
        from response_cache.models import StoredResponse

        response = StoredResponse(
            status=200,
            headers={"content-type": "application/json"},
            body_b64=base64.b64encode(b'{"items": []}').decode("ascii"),
        )

    Inspecting a cache entry::

        entry = cache._entries["c_2147483695"]
        entry.expires_at      # clock reading after which the value is stale
        entry.timer           # asyncio.TimerHandle, threading.Timer or None
"""

import asyncio
import base64
import threading
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CacheEntry(BaseModel):
    """A single cached value and its invalidation state.

    There is at most one live entry per key. Writing to a key replaces the
    entry as a whole, so entries are never merged.

    Attributes:
        value: The cached payload. Opaque to the cache.
        expires_at: Clock reading (seconds) after which the entry is stale,
            or None if the entry never expires by time.
        dependency_snapshot: Dependency values captured at write time.
        ttl_ms: The TTL supplied at write time, in milliseconds.
        timer: Handle of the scheduled expiry notification, present only
            when an expiry callback was supplied.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    value: Any = Field(
        ...,
        description="Cached payload",
    )
    expires_at: float | None = Field(
        default=None,
        description="Clock reading after which the entry is stale",
    )
    dependency_snapshot: Any = Field(
        default=None,
        description="Dependency values captured at write time",
    )
    ttl_ms: float | None = Field(
        default=None,
        description="TTL supplied at write time, in milliseconds",
    )
    timer: asyncio.TimerHandle | threading.Timer | None = Field(
        default=None,
        description="Scheduled expiry notification",
    )

    def is_expired(self, now: float) -> bool:
        """Return True if the entry has a deadline that is not in the future.

        Args:
            now: Current reading of the store's clock.
        """
        return self.expires_at is not None and self.expires_at <= now

    def cancel_timer(self) -> None:
        """Cancel the pending expiry notification, if any."""
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None


class StoredResponse(BaseModel):
    """A cached HTTP response that can be replayed on a cache hit.

    The response body is base64-encoded to safely handle binary content.

    Attributes:
        status: HTTP status code (e.g., 200, 404).
        headers: HTTP response headers with volatile headers removed.
        body_b64: Base64-encoded response body.
    """

    model_config = ConfigDict(frozen=True)

    status: int = Field(
        ...,
        description="HTTP status code",
        ge=100,
        le=599,
        examples=[200, 203, 404],
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="HTTP response headers",
        examples=[{"content-type": "application/json"}],
    )
    body_b64: str = Field(
        ...,
        description="Base64-encoded response body",
        examples=["eyJpdGVtcyI6IFtdfQ=="],
    )

    @field_validator("body_b64")
    @classmethod
    def validate_base64(cls, v: str) -> str:
        """Validate that the body is properly base64-encoded.

        Raises:
            ValueError: If the string is not valid base64.
        """
        try:
            base64.b64decode(v, validate=True)
        except Exception as e:
            raise ValueError(f"Invalid base64 encoding: {e}") from e
        return v

    def get_body_bytes(self) -> bytes:
        """Decode and return the response body as bytes.

        Examples:
            >>> StoredResponse(status=200, body_b64="SGVsbG8=").get_body_bytes()
            b'Hello'
        """
        return base64.b64decode(self.body_b64)
