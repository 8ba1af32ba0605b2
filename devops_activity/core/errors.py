"""Typed exceptions for activity report streaming failures."""

from __future__ import annotations


class ReportStreamError(Exception):
    """Base exception for a failed report generation.

    Attributes:
        message: User-facing description of the failure.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ReportTransportError(ReportStreamError, ConnectionError):
    """The stream request could not be made or the connection dropped."""


class ReportStatusError(ReportTransportError):
    """The report endpoint answered with a non-success HTTP status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class ReportStreamClosedError(ReportStreamError):
    """The transport ended before a terminal event was received."""


class ReportServerError(ReportStreamError):
    """The server reported a stream-level failure through an ``error`` event."""


class DateRangeError(ValueError):
    """Raised when a requested report range is rejected before streaming."""


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


__all__ = [
    "DateRangeError",
    "ReportServerError",
    "ReportStatusError",
    "ReportStreamClosedError",
    "ReportStreamError",
    "ReportTransportError",
    "SettingsLoadError",
]
