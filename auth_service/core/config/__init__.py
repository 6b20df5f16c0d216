"""
Configuration package.

This package contains application configuration and settings.
"""

from auth_service.core.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
