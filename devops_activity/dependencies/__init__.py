"""Expose dependency helpers for services and command line tools."""

from .clients import create_report_controller, get_default_credentials
from .config import get_app_settings

__all__ = [
    "create_report_controller",
    "get_app_settings",
    "get_default_credentials",
]
