"""Pytest configuration for floorsnap tests.

This module provides pytest hooks that apply across all tests.
"""

import logging

import pytest

console_logger = logging.getLogger(__name__)


@pytest.hookimpl(tryfirst=True)
def pytest_configure(config):
    """Make engine debug logs visible on failures."""
    del config  # Unused but required by hookspec.
    logging.getLogger("floorsnap").setLevel(logging.DEBUG)

