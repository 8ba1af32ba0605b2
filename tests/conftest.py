"""Pytest configuration shared across the suite."""

from datetime import datetime, timezone

import pytest

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from devops_activity.core.config import AppSettings
from devops_activity.schemas.request import DateRange, ReportCredentials


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings()


@pytest.fixture
def credentials() -> ReportCredentials:
    return ReportCredentials(token="token-abc", organization_id="org-42")


@pytest.fixture
def date_range() -> DateRange:
    return DateRange(
        start=datetime(2024, 1, 1, tzinfo=timezone.utc),
        end=datetime(2024, 1, 8, tzinfo=timezone.utc),
    )
