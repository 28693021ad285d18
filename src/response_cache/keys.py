"""Cache key derivation for response caching.

Keys are derived from a request-identifying string (normally the request
path plus query string) with a 32-bit rolling hash. The hash iterates UTF-16
code units, so characters outside the Basic Multilingual Plane contribute
their two surrogate halves, and folds the signed 32-bit result into the
non-negative range by adding 2**31.

The hash is not collision-free. Callers that need more separation should
namespace their inputs, which is what build_cache_key does with a prefix.

Examples:
    >>> derive_key("")
    2147483648
    >>> derive_key("hello")
    2246645970
    >>> build_cache_key("/")
    'c_2147483695'
"""

from collections.abc import Iterator

_UINT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000
_OFFSET = 2**31


def derive_key(text: str) -> int:
    """Compute a deterministic, non-negative integer fingerprint for text.

    The algorithm is ``hash = hash * 31 + code`` over the UTF-16 code units
    of the input with 32-bit signed wraparound, shifted by 2**31.

    Args:
        text: Any string, including the empty string.

    Returns:
        An integer in the range [0, 2**32).

    Examples:
        >>> derive_key("a")
        2147483745
        >>> derive_key("Hello World")
        1284938372
    """
    value = 0
    for code in _utf16_code_units(text):
        value = (value * 31 + code) & _UINT32_MASK

    if value & _INT32_SIGN:
        value -= 2**32

    return value + _OFFSET


def build_cache_key(url: str, prefix: str = "c_") -> str:
    """Build the namespaced store key for a request URL.

    Args:
        url: Request path, including the query string when present.
        prefix: Namespace prepended to the numeric fingerprint.

    Returns:
        The store key, e.g. ``"c_2147483695"`` for ``"/"``.
    """
    return f"{prefix}{derive_key(url)}"


def _utf16_code_units(text: str) -> Iterator[int]:
    """Yield the UTF-16 code units of text.

    Lone surrogates already present in the string are yielded unchanged.
    """
    for char in text:
        point = ord(char)
        if point > 0xFFFF:
            point -= 0x10000
            yield 0xD800 + (point >> 10)
            yield 0xDC00 + (point & 0x3FF)
        else:
            yield point
