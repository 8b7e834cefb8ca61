"""
==============================================================================
Configuration Package
==============================================================================

Centralized configuration management using Pydantic Settings.

Usage:
------
    from product_portal.config import get_settings, Settings

    settings = get_settings()
    print(settings.max_products)

==============================================================================
"""

from .settings import STORAGE_BACKENDS, Settings, get_settings

__all__ = [
    "STORAGE_BACKENDS",
    "Settings",
    "get_settings",
]
