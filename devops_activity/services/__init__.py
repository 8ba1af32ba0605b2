"""Service layer exports."""

from .report_aggregator import SectionAggregator
from .report_controller import UNEXPECTED_CLOSE_MESSAGE, ReportStreamController
from .report_view import ReportPresenter, ReportViewState

__all__ = [
    "ReportPresenter",
    "ReportStreamController",
    "ReportViewState",
    "SectionAggregator",
    "UNEXPECTED_CLOSE_MESSAGE",
]
