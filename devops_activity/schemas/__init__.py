"""Expose report, request and wire schemas."""

from .report import (
    SECTION_NAMES,
    ReportMeta,
    ReportSnapshot,
    ReportStatus,
    SectionState,
    SectionStatus,
    TerminalStatus,
)
from .request import DateRange, RangePreset, ReportCredentials
from .wire import CompletePayload, ErrorPayload, SectionPayload

__all__ = [
    "CompletePayload",
    "DateRange",
    "ErrorPayload",
    "RangePreset",
    "ReportCredentials",
    "ReportMeta",
    "ReportSnapshot",
    "ReportStatus",
    "SECTION_NAMES",
    "SectionPayload",
    "SectionState",
    "SectionStatus",
    "TerminalStatus",
]
