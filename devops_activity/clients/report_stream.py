"""Transport client opening the activity report event stream."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx

from devops_activity.core.config import AppSettings
from devops_activity.core.errors import ReportStatusError, ReportTransportError
from devops_activity.schemas.request import DateRange, ReportCredentials
from devops_activity.utils.http import describe_http_error, stream_headers

logger = logging.getLogger(__name__)


class ReportStreamClient:
    """Open the streaming ``GET`` for one report generation."""

    def __init__(self, client: httpx.AsyncClient, settings: AppSettings) -> None:
        self._client = client
        self._settings = settings

    @property
    def url(self) -> str:
        return self._settings.stream_url

    @asynccontextmanager
    async def open(
        self, date_range: DateRange, credentials: ReportCredentials
    ) -> AsyncIterator[AsyncIterator[str]]:
        """Yield the decoded text chunks of the response body.

        The response is released when the block exits, however it exits.
        Non-success statuses raise ``ReportStatusError`` before any of the
        body is read; transport failures surface as ``ReportTransportError``.
        """
        headers = stream_headers(
            credentials, organization_header=self._settings.api.organization_header
        )
        try:
            async with self._client.stream(
                "GET",
                self.url,
                params=date_range.query_params(),
                headers=headers,
            ) as response:
                if not response.is_success:
                    raise ReportStatusError(
                        f"Failed to start report stream (HTTP {response.status_code})",
                        status_code=response.status_code,
                    )
                logger.debug("Report stream opened for org %s", credentials.organization_id)
                yield response.aiter_text()
        except httpx.HTTPError as exc:
            raise ReportTransportError(describe_http_error(exc)) from exc


__all__ = ["ReportStreamClient"]
