"""Tests for dependency snapshot comparison and resolution."""

import pytest

from response_cache.core.dependencies import resolve_dependencies, snapshots_equal


class TestSnapshotsEqual:
    """Tests for snapshots_equal."""

    def test_equal_lists(self) -> None:
        assert snapshots_equal([1, "a", None], [1, "a", None])

    def test_order_sensitive(self) -> None:
        """Element order matters."""
        assert not snapshots_equal([1, 2], [2, 1])

    def test_nested_structures_compared_by_value(self) -> None:
        """Nested values are compared structurally, not by identity."""
        assert snapshots_equal([{"v": [1, 2]}], [{"v": [1, 2]}])
        assert not snapshots_equal([{"v": [1, 2]}], [{"v": [1, 3]}])

    def test_mapping_key_order_ignored(self) -> None:
        """Mappings with the same items are equal regardless of key order."""
        assert snapshots_equal([{"a": 1, "b": 2}], [{"b": 2, "a": 1}])

    def test_different_lengths(self) -> None:
        assert not snapshots_equal([1], [1, 1])

    def test_none_against_list(self) -> None:
        assert not snapshots_equal([1], None)

    def test_empty_lists_equal(self) -> None:
        assert snapshots_equal([], [])

    def test_unserializable_values_compare_as_changed(self) -> None:
        """Objects that cannot be serialized are always treated as changed."""
        marker = object()
        assert not snapshots_equal([marker], [marker])

    def test_cyclic_values_compare_as_changed(self) -> None:
        """Cyclic structures are always treated as changed."""
        cyclic: list = []
        cyclic.append(cyclic)
        assert not snapshots_equal([cyclic], [cyclic])


class TestResolveDependencies:
    """Tests for resolve_dependencies."""

    @pytest.mark.asyncio
    async def test_none_means_no_dependencies(self) -> None:
        assert await resolve_dependencies(None) == []

    @pytest.mark.asyncio
    async def test_sync_function(self) -> None:
        assert await resolve_dependencies(lambda: (1, "two")) == [1, "two"]

    @pytest.mark.asyncio
    async def test_async_function(self) -> None:
        async def depends_on() -> list[int]:
            return [3]

        assert await resolve_dependencies(depends_on) == [3]

    @pytest.mark.asyncio
    async def test_called_once(self) -> None:
        """The dependency function runs exactly once per resolution."""
        calls = []

        def depends_on() -> list[int]:
            calls.append(1)
            return [len(calls)]

        assert await resolve_dependencies(depends_on) == [1]
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_string_result_is_single_dependency(self) -> None:
        assert await resolve_dependencies(lambda: "etag-1") == ["etag-1"]

    @pytest.mark.asyncio
    async def test_none_result_is_empty(self) -> None:
        assert await resolve_dependencies(lambda: None) == []
