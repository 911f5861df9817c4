"""Shared fixtures"""

import pytest

from treelog import reset_logging


@pytest.fixture(autouse=True)
def fresh_logging():
    """Start every test with the default logging configuration."""
    reset_logging()
    yield
    reset_logging()
