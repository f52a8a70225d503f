"""
Configuration module.

Exports:
    settings: Application settings instance
    get_settings: Function to get settings (for dependency injection)
    DEFAULT_SPEC_CATALOG: Built-in gear spec catalog
"""

from config.settings import settings, get_settings, Settings
from config.spec_catalog import DEFAULT_SPEC_CATALOG

__all__ = [
    # Settings
    "settings",
    "get_settings",
    "Settings",

    # Catalog
    "DEFAULT_SPEC_CATALOG",
]
