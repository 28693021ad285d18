"""Utility modules for the response cache."""

from .headers import (
    CACHE_STATUS_HEADER,
    VOLATILE_HEADERS,
    add_cache_status_header,
    filter_response_headers,
    get_header_value,
)

__all__ = [
    "filter_response_headers",
    "add_cache_status_header",
    "get_header_value",
    "CACHE_STATUS_HEADER",
    "VOLATILE_HEADERS",
]
