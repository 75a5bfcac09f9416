"""Configuration management for docflow.

Usage:
    >>> from docflow.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.log_level)
"""

from docflow.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
