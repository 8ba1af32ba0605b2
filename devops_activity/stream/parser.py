"""Parse raw ``event:``/``data:`` frames into typed report stream events."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import ValidationError

from devops_activity.schemas.report import Duration
from devops_activity.schemas.wire import CompletePayload, ErrorPayload, SectionPayload

logger = logging.getLogger(__name__)

_FRAME_PATTERN = re.compile(r"event: ?([\w-]+)\r?\ndata: ?(.*)")

SECTION_EVENT = "section"
COMPLETE_EVENT = "complete"
ERROR_EVENT = "error"


@dataclass(frozen=True, slots=True)
class Frame:
    """One event record as recovered from the wire, payload still encoded."""

    event_type: str
    data: str


@dataclass(frozen=True, slots=True)
class SectionEvent:
    name: str
    data: Any = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return bool(self.error)


@dataclass(frozen=True, slots=True)
class CompleteEvent:
    generated_at: str
    duration_ms: Duration


@dataclass(frozen=True, slots=True)
class ErrorEvent:
    message: str


StreamEvent = Union[SectionEvent, CompleteEvent, ErrorEvent]


def parse_frame(raw: str) -> Optional[Frame]:
    """Split a frame into its event name and data line, or return ``None``."""
    match = _FRAME_PATTERN.fullmatch(raw.strip())
    if match is None:
        return None
    event_type, data = match.groups()
    return Frame(event_type=event_type, data=data)


def _to_event(frame: Frame, payload: Any) -> Optional[StreamEvent]:
    if frame.event_type == SECTION_EVENT:
        section = SectionPayload.model_validate(payload)
        return SectionEvent(name=section.name, data=section.data, error=section.error or None)
    if frame.event_type == COMPLETE_EVENT:
        complete = CompletePayload.model_validate(payload)
        return CompleteEvent(generated_at=complete.generated_at, duration_ms=complete.duration)
    if frame.event_type == ERROR_EVENT:
        return ErrorEvent(message=ErrorPayload.model_validate(payload).message)
    return None


def parse_event(raw: str) -> Optional[StreamEvent]:
    """Turn one raw frame into a typed event.

    Malformed frames, undecodable JSON and payloads of the wrong shape are
    logged and dropped; unknown event names are skipped quietly so that newer
    servers can add events without breaking older clients.
    """
    frame = parse_frame(raw)
    if frame is None:
        logger.warning("Dropping malformed report frame: %.120r", raw)
        return None

    if frame.event_type not in (SECTION_EVENT, COMPLETE_EVENT, ERROR_EVENT):
        logger.debug("Ignoring unknown report event %r", frame.event_type)
        return None

    try:
        payload = json.loads(frame.data)
    except json.JSONDecodeError as exc:
        logger.warning("Dropping %s frame with invalid JSON: %s", frame.event_type, exc)
        return None

    try:
        return _to_event(frame, payload)
    except ValidationError as exc:
        logger.warning(
            "Dropping %s frame with unexpected payload shape: %s",
            frame.event_type,
            exc.errors(include_url=False),
        )
        return None


__all__ = [
    "CompleteEvent",
    "ErrorEvent",
    "Frame",
    "SectionEvent",
    "StreamEvent",
    "parse_event",
    "parse_frame",
]
