"""Header filtering and manipulation utilities for the response cache.

This module provides functions for:
- Filtering volatile headers before a response is stored
- Marking responses as cache hits or misses
- Case-insensitive header lookup
"""

CACHE_STATUS_HEADER = "X-Cache"

# Headers that describe a single transmission rather than the response
# content, so they are never stored
VOLATILE_HEADERS = {
    "date",
    "server",
    "connection",
    "transfer-encoding",
    "keep-alive",
    "trailer",
    "upgrade",
    "proxy-connection",
    "proxy-authenticate",
    "proxy-authorization",
    "set-cookie",
    "x-cache",
}


def filter_response_headers(
    headers: dict[str, str],
    additional_volatile: list[str] | None = None,
) -> dict[str, str]:
    """Filter volatile headers from response headers.

    Args:
        headers: Original response headers
        additional_volatile: Additional header names to remove (case-insensitive)

    Returns:
        Filtered headers dictionary

    Example:
        >>> headers = {
        ...     "Content-Type": "application/json",
        ...     "Date": "Mon, 01 Oct 2025 12:00:00 GMT",
        ...     "Server": "uvicorn"
        ... }
        >>> filter_response_headers(headers)
        {'Content-Type': 'application/json'}
    """
    headers_to_remove = VOLATILE_HEADERS.copy()

    if additional_volatile:
        headers_to_remove.update(h.lower() for h in additional_volatile)

    return {key: value for key, value in headers.items() if key.lower() not in headers_to_remove}


def add_cache_status_header(headers: dict[str, str], hit: bool) -> dict[str, str]:
    """Return a copy of headers marked as a cache hit or miss.

    Any existing cache status header is replaced regardless of its case.

    Example:
        >>> add_cache_status_header({"content-type": "text/plain"}, hit=True)
        {'content-type': 'text/plain', 'X-Cache': 'HIT'}
    """
    result = {
        key: value for key, value in headers.items() if key.lower() != CACHE_STATUS_HEADER.lower()
    }
    result[CACHE_STATUS_HEADER] = "HIT" if hit else "MISS"
    return result


def get_header_value(
    headers: dict[str, str],
    header_name: str,
    default: str | None = None,
) -> str | None:
    """Get header value with case-insensitive lookup.

    Example:
        >>> get_header_value({"Content-Type": "application/json"}, "content-type")
        'application/json'
        >>> get_header_value({}, "missing", "default")
        'default'
    """
    header_name_lower = header_name.lower()

    for key, value in headers.items():
        if key.lower() == header_name_lower:
            return value

    return default
