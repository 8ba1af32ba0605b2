"""
State machine owning the report of the generation currently streaming.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Callable, Dict, Optional

from devops_activity.schemas.report import (
    SECTION_NAMES,
    Duration,
    ReportMeta,
    ReportSnapshot,
    ReportStatus,
    SectionState,
)
from devops_activity.schemas.request import format_timestamp
from devops_activity.stream.parser import (
    CompleteEvent,
    ErrorEvent,
    SectionEvent,
    StreamEvent,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SectionAggregator:
    """Apply stream events to a single report and hand out snapshots.

    Every method is synchronous and touches one slot at most. Methods that
    change state return the new snapshot; events that cannot change state
    (unknown section names, anything after a terminal event) return ``None``.
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        self._clock = clock or _utcnow
        self._generation = 0
        self._sections: Dict[str, SectionState] = {}
        self._status = ReportStatus.STREAMING
        self._meta: Optional[ReportMeta] = None
        self._error: Optional[str] = None
        self._clear()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_terminal(self) -> bool:
        return self._status is not ReportStatus.STREAMING

    def _clear(self) -> None:
        self._sections = {name: SectionState.pending() for name in SECTION_NAMES}
        self._status = ReportStatus.STREAMING
        self._meta = None
        self._error = None

    def reset(self) -> ReportSnapshot:
        """Start a new generation with every section pending."""
        self._generation += 1
        self._clear()
        return self.snapshot()

    def snapshot(self) -> ReportSnapshot:
        return ReportSnapshot(
            generation=self._generation,
            sections=MappingProxyType(dict(self._sections)),
            status=self._status,
            meta=self._meta,
            error=self._error,
        )

    def apply_section(self, name: str, result: SectionState) -> Optional[ReportSnapshot]:
        """Record one section's outcome, replacing any earlier one."""
        if self.is_terminal:
            logger.debug("Ignoring section %r after generation %d ended", name, self._generation)
            return None
        if name not in self._sections:
            logger.warning("Ignoring unknown report section %r", name)
            return None

        self._sections[name] = result
        self._meta = ReportMeta(generated_at=format_timestamp(self._clock()))
        return self.snapshot()

    def apply_complete(
        self, generated_at: str, duration_ms: Duration
    ) -> Optional[ReportSnapshot]:
        """Adopt the server's timing metadata and close the generation."""
        if self.is_terminal:
            return None
        self._meta = ReportMeta(generated_at=generated_at, duration_ms=duration_ms)
        self._status = ReportStatus.COMPLETE
        return self.snapshot()

    def apply_fatal_error(self, message: str) -> Optional[ReportSnapshot]:
        """Fail the generation; sections already received stay visible."""
        if self.is_terminal:
            return None
        self._status = ReportStatus.FAILED
        self._error = message
        return self.snapshot()

    def apply(self, event: StreamEvent) -> Optional[ReportSnapshot]:
        if isinstance(event, SectionEvent):
            if event.failed:
                result = SectionState.failed(event.error or "")
            else:
                result = SectionState.ready(event.data)
            return self.apply_section(event.name, result)
        if isinstance(event, CompleteEvent):
            return self.apply_complete(event.generated_at, event.duration_ms)
        if isinstance(event, ErrorEvent):
            return self.apply_fatal_error(event.message)
        raise TypeError(f"Unsupported stream event: {event!r}")


__all__ = ["Clock", "SectionAggregator"]
