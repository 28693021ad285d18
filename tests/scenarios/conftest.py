"""Shared fixtures for scenario tests."""

import pytest

from .app import AppState


@pytest.fixture
def state() -> AppState:
    """Provide fresh endpoint state for each test."""
    return AppState()
