"""Custom exceptions for the response cache.

The core store does not fail on well-formed input: missing keys, expired
entries and changed dependencies are all reported as cache misses. Errors
are raised while building configuration, before any cache exists.

Examples:
    Catching all response cache errors::

        from response_cache.exceptions import ResponseCacheError

        try:
            config = ResponseCacheConfig.from_env()
        except ResponseCacheError as e:
            logger.error("cache.config_invalid", error=e.message)
"""


class ResponseCacheError(Exception):
    """Base exception for all response cache errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        """Initialize the exception with a message.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(ResponseCacheError, ValueError):
    """An environment variable holds a value that cannot be parsed.

    Raised by ResponseCacheConfig.from_env() for integer and boolean
    variables. It is also a ValueError, like the errors raised by field
    validation.

    Attributes:
        message: Human-readable error description.
        variable: Name of the offending environment variable.
        value: The raw value that was rejected.
    """

    def __init__(self, message: str, variable: str, value: str) -> None:
        """Initialize the error with details.

        Args:
            message: Human-readable error description.
            variable: Name of the offending environment variable.
            value: The raw value that was rejected.
        """
        super().__init__(message)
        self.variable = variable
        self.value = value
