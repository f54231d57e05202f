"""
Pytest configuration and shared fixtures.
"""

import pytest

from critscore.log import reset_logging


@pytest.fixture(autouse=True)
def clean_logging():
    """Each test starts without the CLI's stream handler."""
    reset_logging()
    yield
    reset_logging()
