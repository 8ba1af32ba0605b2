"""Wire-level helpers: frame reassembly and event parsing."""

from .decoder import FRAME_DELIMITER, FrameDecoder
from .parser import (
    CompleteEvent,
    ErrorEvent,
    Frame,
    SectionEvent,
    StreamEvent,
    parse_event,
    parse_frame,
)

__all__ = [
    "CompleteEvent",
    "ErrorEvent",
    "FRAME_DELIMITER",
    "Frame",
    "FrameDecoder",
    "SectionEvent",
    "StreamEvent",
    "parse_event",
    "parse_frame",
]
