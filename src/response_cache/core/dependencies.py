"""Dependency snapshot comparison and resolution.

A dependency snapshot is the sequence of values a caller's ``depends_on``
function returns for a request. Snapshots are compared by value: two
snapshots are equal when their canonical JSON forms are equal. Sequence
order matters, mapping key order does not.

Values that cannot be rendered as JSON (arbitrary objects, cyclic
structures) make the comparison report a change. A snapshot the cache
cannot reason about therefore invalidates the entry instead of serving a
possibly stale value.
"""

import inspect
import json
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

DependsOn = Callable[[], Sequence[Any] | Awaitable[Sequence[Any]]]

_UNSERIALIZABLE = object()


def snapshots_equal(stored: Any, current: Any) -> bool:
    """Compare two dependency snapshots by value.

    Args:
        stored: Snapshot recorded by the cache.
        current: Snapshot computed for the current request.

    Returns:
        True if both snapshots serialize to the same canonical JSON.
        False if they differ or either one cannot be serialized.

    Examples:
        >>> snapshots_equal([1, {"a": 1, "b": 2}], [1, {"b": 2, "a": 1}])
        True
        >>> snapshots_equal([1, 2], [2, 1])
        False
        >>> snapshots_equal([object()], [object()])
        False
    """
    stored_form = _canonical(stored)
    if stored_form is _UNSERIALIZABLE:
        return False

    current_form = _canonical(current)
    if current_form is _UNSERIALIZABLE:
        return False

    return stored_form == current_form


async def resolve_dependencies(depends_on: DependsOn | None) -> list[Any]:
    """Invoke a dependency function and normalize its result to a list.

    The function is called exactly once. Coroutine functions and functions
    returning awaitables are awaited.

    Args:
        depends_on: Zero-argument callable returning the dependency values,
            or None for "no dependencies".

    Returns:
        The dependency snapshot as a list.
    """
    if depends_on is None:
        return []

    result = depends_on()
    if inspect.isawaitable(result):
        result = await result

    if result is None:
        return []
    if isinstance(result, (str, bytes)):
        # A bare string is one dependency, not a sequence of characters
        return [result]
    return list(result)


def _canonical(snapshot: Any) -> str | object:
    try:
        return json.dumps(snapshot, sort_keys=True, separators=(",", ":"), allow_nan=True)
    except (TypeError, ValueError, RecursionError):
        return _UNSERIALIZABLE
