"""
Factory functions wiring settings, transport and services together.
"""

from __future__ import annotations

import httpx

from devops_activity.core.config import AppSettings
from devops_activity.schemas.request import ReportCredentials
from devops_activity.services import ReportPresenter, ReportStreamController

from .config import get_app_settings


def get_default_credentials(settings: AppSettings | None = None) -> ReportCredentials | None:
    """Credentials from configuration, when both token and organization are set."""
    api = (settings or get_app_settings()).api
    if not api.token or not api.organization_id:
        return None
    return ReportCredentials(token=api.token, organization_id=api.organization_id)


def create_report_controller(
    presenter: ReportPresenter,
    *,
    settings: AppSettings | None = None,
    client: httpx.AsyncClient | None = None,
) -> ReportStreamController:
    """Build a controller.

    HTTP clients are bound to the event loop that first uses them, so the
    controller creates (and later closes) its own unless one is supplied.
    """
    return ReportStreamController(
        presenter,
        settings=settings or get_app_settings(),
        client=client,
    )


__all__ = ["create_report_controller", "get_default_credentials"]
