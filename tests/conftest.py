"""Shared pytest configuration for the docflow test suite."""

from __future__ import annotations

import pytest

from docflow.config.settings import get_settings


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Make every test see settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
