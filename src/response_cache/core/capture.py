"""Response capture and replay for the response cache.

Capturing turns a freshly produced response into a StoredResponse that can
live in the cache: volatile headers are dropped and the body is
base64-encoded. Replaying reverses this for a cache hit and marks the
result with ``X-Cache: HIT``.

Examples:
    Round trip::

        from response_cache.core.capture import (
            CapturedResponse,
            capture_response,
            replay_response,
        )

        fresh = CapturedResponse(
            status=200,
            headers={"content-type": "application/json", "date": "..."},
            body=b'{"items": []}',
        )
        stored = capture_response(fresh)      # "date" is not stored
        replayed = replay_response(stored)
        # replayed.headers["X-Cache"] == "HIT"
"""

import base64

from response_cache.models import StoredResponse
from response_cache.utils.headers import (
    add_cache_status_header,
    filter_response_headers,
    get_header_value,
)


class CapturedResponse:
    """Framework-neutral HTTP response.

    Attributes:
        status: HTTP status code (e.g., 200, 404, 500)
        headers: Response headers as key-value pairs
        body: Response body as bytes
    """

    def __init__(self, status: int, headers: dict[str, str], body: bytes) -> None:
        self.status = status
        self.headers = headers
        self.body = body


def capture_response(
    response: CapturedResponse,
    additional_volatile: list[str] | None = None,
) -> StoredResponse:
    """Serialize a response into a cacheable record.

    Args:
        response: The response produced by the handler
        additional_volatile: Extra header names to leave out of the record

    Returns:
        StoredResponse holding status, filtered headers and encoded body
    """
    return StoredResponse(
        status=response.status,
        headers=filter_response_headers(response.headers, additional_volatile),
        body_b64=base64.b64encode(response.body).decode("ascii"),
    )


def replay_response(stored: StoredResponse) -> CapturedResponse:
    """Reconstruct a response from a cached record.

    Args:
        stored: The cached record

    Returns:
        CapturedResponse with the stored status and body, and the stored
        headers plus ``X-Cache: HIT``
    """
    return CapturedResponse(
        status=stored.status,
        headers=add_cache_status_header(stored.headers, hit=True),
        body=stored.get_body_bytes(),
    )


def is_cacheable(response: CapturedResponse, cache_error_responses: bool = False) -> bool:
    """Decide whether a freshly produced response may be stored.

    Responses marked ``Cache-Control: no-store`` are never stored. Error
    responses (status >= 400) are stored only when cache_error_responses
    is set.

    Examples:
        >>> is_cacheable(CapturedResponse(200, {}, b""))
        True
        >>> is_cacheable(CapturedResponse(500, {}, b""))
        False
        >>> is_cacheable(CapturedResponse(200, {"Cache-Control": "no-store"}, b""))
        False
    """
    cache_control = get_header_value(response.headers, "cache-control", "") or ""
    directives = {part.strip().lower() for part in cache_control.split(",")}
    if "no-store" in directives:
        return False

    return cache_error_responses or response.status < 400
