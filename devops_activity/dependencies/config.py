"""
Dependency helpers for injecting configuration into services and tools.
"""

from devops_activity.core.config import AppSettings, get_settings


def get_app_settings() -> AppSettings:
    """Return the process-wide application settings."""
    return get_settings()


__all__ = ["get_app_settings"]
