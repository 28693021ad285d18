"""
Pytest configuration and shared fixtures for response_cache tests.
"""

import pytest

from response_cache.storage.memory import MemoryCache


class FakeClock:
    """Manually advanced time source for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake clock starting at an arbitrary reading."""
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> MemoryCache:
    """Create a fresh MemoryCache driven by the fake clock."""
    return MemoryCache(clock=clock)
