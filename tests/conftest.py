"""Pytest configuration and shared fixtures."""

from unittest.mock import MagicMock

import pytest


@pytest.fixture(autouse=True)
def reset_logging_state():
    """Reset logging state before each test."""
    from axwatch.logging import reset_logging

    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def sink():
    """Mock message sink."""
    return MagicMock()
