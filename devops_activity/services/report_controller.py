"""
Drive one activity report generation from request to terminal outcome.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Set

import httpx

from devops_activity.clients.report_stream import ReportStreamClient
from devops_activity.core.config import AppSettings, get_settings
from devops_activity.core.errors import (
    ReportServerError,
    ReportStreamClosedError,
    ReportStreamError,
)
from devops_activity.schemas.report import ReportSnapshot, TerminalStatus
from devops_activity.schemas.request import DateRange, ReportCredentials
from devops_activity.services.report_aggregator import Clock, SectionAggregator
from devops_activity.services.report_view import ReportPresenter
from devops_activity.stream.decoder import FrameDecoder
from devops_activity.stream.parser import CompleteEvent, ErrorEvent, parse_event
from devops_activity.utils.http import build_async_client

logger = logging.getLogger(__name__)

UNEXPECTED_CLOSE_MESSAGE = "Report stream closed before completion"


class ReportStreamController:
    """Own the stream request, its read loop and its cancellation.

    Only one generation runs at a time; ``start`` cancels whatever is in
    flight. Every callback is tagged with the generation that produced it and
    dropped if that generation is no longer the active one, so a cancelled
    stream can never overwrite the state of a newer one.
    """

    def __init__(
        self,
        presenter: ReportPresenter,
        *,
        settings: AppSettings | None = None,
        client: httpx.AsyncClient | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._owns_client = client is None
        self._http = client or build_async_client(self._settings)
        self._transport = ReportStreamClient(self._http, self._settings)
        self._presenter = presenter
        self._aggregator = SectionAggregator(clock=clock)
        self._task: Optional[asyncio.Task[None]] = None
        self._cancelled: Set[asyncio.Task[None]] = set()
        self._active_generation = 0

    @property
    def generation(self) -> int:
        """Number of the most recently started generation."""
        return self._aggregator.generation

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def snapshot(self) -> ReportSnapshot:
        return self._aggregator.snapshot()

    def start(self, date_range: DateRange, credentials: ReportCredentials) -> None:
        """Kick off a new generation; results arrive through the presenter.

        Must be called from a running event loop. Raises ``DateRangeError``
        before anything is cancelled or requested when the range is invalid.
        """
        date_range.ensure_valid()
        loop = asyncio.get_running_loop()

        self.cancel()
        snapshot = self._aggregator.reset()
        generation = snapshot.generation
        self._active_generation = generation
        logger.info(
            "Starting activity report generation %d for %s..%s",
            generation,
            date_range.start.isoformat(),
            date_range.end.isoformat(),
        )
        self._publish(generation, snapshot)
        self._task = loop.create_task(
            self._run(generation, date_range, credentials),
            name=f"activity-report-{generation}",
        )

    def cancel(self) -> None:
        """Stop the active generation; it will emit nothing further."""
        task, self._task = self._task, None
        cancelled_generation = self._active_generation
        self._active_generation = 0
        if task is not None and not task.done():
            task.cancel()
            self._cancelled.add(task)
            task.add_done_callback(self._cancelled.discard)
            logger.info("Cancelled activity report generation %d", cancelled_generation)

    async def wait(self) -> None:
        """Wait for the active generation to finish.

        Generations cancelled earlier are awaited too, so their responses are
        released on return. Re-raises anything the presenter raised from
        inside the active read loop.
        """
        task = self._task
        await self._drain_cancelled()
        if task is None:
            return
        await asyncio.wait({task})
        if not task.cancelled():
            task.result()

    async def _drain_cancelled(self) -> None:
        if self._cancelled:
            await asyncio.gather(*self._cancelled, return_exceptions=True)

    async def run(self, date_range: DateRange, credentials: ReportCredentials) -> None:
        self.start(date_range, credentials)
        await self.wait()

    async def aclose(self) -> None:
        self.cancel()
        await self._drain_cancelled()
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "ReportStreamController":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _is_stale(self, generation: int) -> bool:
        return generation != self._active_generation

    async def _run(
        self, generation: int, date_range: DateRange, credentials: ReportCredentials
    ) -> None:
        decoder = FrameDecoder()
        try:
            async with self._transport.open(date_range, credentials) as chunks:
                async for chunk in chunks:
                    for raw in decoder.feed(chunk):
                        if self._handle_frame(generation, raw):
                            return
                    if self._is_stale(generation):
                        return
            if decoder.close():
                logger.warning("Report stream ended inside a frame (generation %d)", generation)
            raise ReportStreamClosedError(UNEXPECTED_CLOSE_MESSAGE)
        except ReportStreamError as exc:
            self._fail(generation, exc.message)

    def _handle_frame(self, generation: int, raw: str) -> bool:
        """Apply one frame; returns True once the generation is over.

        A stream-level ``error`` event raises ``ReportServerError`` after its
        snapshot is published so it ends the generation like any other failure.
        """
        if self._is_stale(generation):
            return True
        event = parse_event(raw)
        if event is None:
            return False

        snapshot = self._aggregator.apply(event)
        if snapshot is None:
            return self._aggregator.is_terminal
        self._publish(generation, snapshot)

        if isinstance(event, CompleteEvent):
            logger.info(
                "Activity report generation %d complete in %sms",
                generation,
                event.duration_ms,
            )
            self._finish(
                generation, TerminalStatus.succeeded(event.generated_at, event.duration_ms)
            )
            return True
        if isinstance(event, ErrorEvent):
            raise ReportServerError(event.message)
        return False

    def _fail(self, generation: int, message: str) -> None:
        if self._is_stale(generation):
            return
        logger.warning("Activity report generation %d failed: %s", generation, message)
        snapshot = self._aggregator.apply_fatal_error(message)
        if snapshot is not None:
            self._publish(generation, snapshot)
        self._finish(generation, TerminalStatus.failed(message))

    def _publish(self, generation: int, snapshot: ReportSnapshot) -> None:
        if self._is_stale(generation):
            logger.debug("Dropping snapshot from stale generation %d", generation)
            return
        self._presenter.on_snapshot(snapshot)

    def _finish(self, generation: int, status: TerminalStatus) -> None:
        if self._is_stale(generation):
            return
        self._presenter.on_terminal(status)


__all__ = ["ReportStreamController", "UNEXPECTED_CLOSE_MESSAGE"]
