"""Configuration module for the response cache middleware.

This module provides the ResponseCacheConfig class that controls which
requests are cached, for how long, and how cache keys are namespaced.

Example:
    Basic usage with defaults:

        >>> config = ResponseCacheConfig()
        >>> config.cached_methods
        ['GET', 'HEAD']
        >>> config.default_ttl_ms
        3600000

    Custom configuration:

        >>> config = ResponseCacheConfig(
        ...     cached_methods=["GET"],
        ...     default_ttl_ms=30000,
        ...     key_prefix="api_",
        ... )

    Loading from environment:

        >>> import os
        >>> os.environ['RESPONSE_CACHE_DEFAULT_TTL_MS'] = '60000'
        >>> config = ResponseCacheConfig.from_env()
"""

import os
from typing import Any

from pydantic import BaseModel, Field, field_validator

from response_cache.exceptions import ConfigurationError

# Valid HTTP methods for caching
VALID_HTTP_METHODS = {
    "GET",
    "HEAD",
    "POST",
    "PUT",
    "DELETE",
    "CONNECT",
    "OPTIONS",
    "TRACE",
    "PATCH",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ResponseCacheConfig(BaseModel):
    """Configuration for the response cache middleware.

    Attributes:
        cached_methods: HTTP methods whose responses are cached. Requests with
            other methods bypass the cache. Default is GET and HEAD.
        default_ttl_ms: Time-to-live for cached responses in milliseconds.
            0 disables time-based expiry; entries then live until removed or
            invalidated by a dependency change. Default is 3600000 (1 hour).
        key_prefix: Namespace prepended to derived cache keys. Default "c_".
        cache_error_responses: If True, responses with status >= 400 are
            cached as well. Default is False.
        sweep_interval_seconds: Interval for the background sweeper that
            removes expired entries nobody reads again. Must be between 1
            and 86400. Default is 300.
        extra_volatile_headers: Additional response header names that are
            never stored. Normalized to lowercase.

    Note:
        This class is immutable (frozen=True). Create a new instance if you
        need different settings.
    """

    cached_methods: list[str] | str = Field(
        default=["GET", "HEAD"],
        description="HTTP methods whose responses are cached",
    )
    default_ttl_ms: int = Field(
        default=3600000,
        description="Time-to-live for cached responses in milliseconds (0=no expiry)",
    )
    key_prefix: str = Field(
        default="c_",
        description="Namespace prepended to derived cache keys",
    )
    cache_error_responses: bool = Field(
        default=False,
        description="Whether responses with status >= 400 are cached",
    )
    sweep_interval_seconds: int = Field(
        default=300,
        description="Interval between background sweeps in seconds (1-86400)",
    )
    extra_volatile_headers: list[str] | str = Field(
        default=[],
        description="Additional response header names that are never stored",
    )

    model_config = {"frozen": True}

    @field_validator("cached_methods", mode="before")
    @classmethod
    def validate_cached_methods(cls, v: Any) -> list[str]:
        """Validate and normalize cached HTTP methods.

        Raises:
            ValueError: If any method is not a valid HTTP method.

        Example:
            >>> ResponseCacheConfig(cached_methods="get, head").cached_methods
            ['GET', 'HEAD']
        """
        if isinstance(v, str):
            v = [method.strip() for method in v.split(",") if method.strip()]

        if not isinstance(v, list):
            raise ValueError("cached_methods must be a list or comma-separated string")

        methods = [method.upper() for method in v]

        invalid_methods = set(methods) - VALID_HTTP_METHODS
        if invalid_methods:
            raise ValueError(
                f"Invalid HTTP methods: {', '.join(sorted(invalid_methods))}. "
                f"Valid methods are: {', '.join(sorted(VALID_HTTP_METHODS))}"
            )

        return methods

    @field_validator("default_ttl_ms")
    @classmethod
    def validate_default_ttl_ms(cls, v: int) -> int:
        """Validate TTL is non-negative.

        Raises:
            ValueError: If TTL is negative.
        """
        if v < 0:
            raise ValueError(f"default_ttl_ms must be >= 0, got {v}")
        return v

    @field_validator("sweep_interval_seconds")
    @classmethod
    def validate_sweep_interval_seconds(cls, v: int) -> int:
        """Validate the sweep interval is within acceptable range.

        Raises:
            ValueError: If interval is not between 1 and 86400 (1 day).
        """
        if not (1 <= v <= 86400):
            raise ValueError(f"sweep_interval_seconds must be between 1 and 86400, got {v}")
        return v

    @field_validator("extra_volatile_headers", mode="before")
    @classmethod
    def validate_extra_volatile_headers(cls, v: Any) -> list[str]:
        """Normalize extra volatile header names to lowercase.

        Example:
            >>> ResponseCacheConfig(extra_volatile_headers=["X-Request-ID"]).extra_volatile_headers
            ['x-request-id']
        """
        if isinstance(v, str):
            v = [header.strip() for header in v.split(",") if header.strip()]

        if not isinstance(v, list):
            raise ValueError("extra_volatile_headers must be a list or comma-separated string")

        return [header.lower() for header in v]

    @classmethod
    def from_env(cls, prefix: str = "RESPONSE_CACHE_") -> "ResponseCacheConfig":
        """Create configuration from environment variables.

        Variable names are the uppercase field names with the prefix, e.g.
        ``RESPONSE_CACHE_DEFAULT_TTL_MS``. Missing variables use defaults.

        Raises:
            ConfigurationError: If an integer or boolean variable cannot be
                parsed.
        """
        config_dict: dict[str, Any] = {}

        field_types = {
            "cached_methods": list,
            "default_ttl_ms": int,
            "key_prefix": str,
            "cache_error_responses": bool,
            "sweep_interval_seconds": int,
            "extra_volatile_headers": list,
        }

        for field_name, field_type in field_types.items():
            env_var = f"{prefix}{field_name.upper()}"
            env_value = os.environ.get(env_var)

            if env_value is None:
                continue

            if field_type is int:
                config_dict[field_name] = _parse_int(env_var, env_value)
            elif field_type is bool:
                config_dict[field_name] = _parse_bool(env_var, env_value)
            else:
                # Lists arrive as comma-separated strings
                config_dict[field_name] = env_value

        return cls(**config_dict)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "ResponseCacheConfig":
        """Create configuration from a dictionary.

        Raises:
            ValidationError: If the dictionary contains invalid values.
        """
        return cls(**config_dict)


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"{name} must be a boolean value, got {value!r}", variable=name, value=value
    )


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be an integer, got {value!r}", variable=name, value=value
        ) from e
