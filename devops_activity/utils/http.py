"""HTTP utilities shared by the report stream transport."""

from __future__ import annotations

import httpx

from devops_activity.core.config import AppSettings
from devops_activity.schemas.request import ReportCredentials

EVENT_STREAM_MEDIA_TYPE = "text/event-stream"


def build_timeout(settings: AppSettings) -> httpx.Timeout:
    """Short connect timeout, long read timeout: sections can take a while."""
    stream = settings.stream
    return httpx.Timeout(
        stream.read_timeout_seconds,
        connect=stream.connect_timeout_seconds,
    )


def build_async_client(settings: AppSettings) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=build_timeout(settings))


def stream_headers(credentials: ReportCredentials, *, organization_header: str) -> dict[str, str]:
    """Headers authorizing a stream request for one organization."""
    return {
        "Authorization": f"Bearer {credentials.token}",
        organization_header: credentials.organization_id,
        "Accept": EVENT_STREAM_MEDIA_TYPE,
        "Cache-Control": "no-cache",
    }


def describe_http_error(exc: httpx.HTTPError) -> str:
    detail = str(exc) or exc.__class__.__name__
    return f"Report stream request failed: {detail}"


__all__ = [
    "EVENT_STREAM_MEDIA_TYPE",
    "build_async_client",
    "build_timeout",
    "describe_http_error",
    "stream_headers",
]
