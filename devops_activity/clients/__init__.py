"""Expose constructed client wrappers."""

from .report_stream import ReportStreamClient

__all__ = ["ReportStreamClient"]
