"""
Presentation-side contract for report snapshots, plus a ready-made view state.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Protocol

from devops_activity.schemas.report import ReportSnapshot, TerminalStatus

logger = logging.getLogger(__name__)


class ReportPresenter(Protocol):
    """Receiver of everything a report generation produces."""

    def on_snapshot(self, snapshot: ReportSnapshot) -> None:
        """Render the report as it stands after a state change."""

    def on_terminal(self, status: TerminalStatus) -> None:
        """Handle the single outcome of a generation."""


ViewListener = Callable[["ReportViewState"], None]


class ReportViewState:
    """Track what a dashboard widget shows: the report, a spinner and an error.

    By default a failed generation keeps whatever sections already arrived so
    the user still sees a partial report next to the error. Pass
    ``clear_on_error=True`` to drop them instead.
    """

    def __init__(self, *, clear_on_error: bool = False) -> None:
        self.clear_on_error = clear_on_error
        self.report: Optional[ReportSnapshot] = None
        self.terminal: Optional[TerminalStatus] = None
        self.loading = False
        self.error: Optional[str] = None
        self._listeners: List[ViewListener] = []

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @property
    def has_data(self) -> bool:
        if self.report is None:
            return False
        return any(not state.is_pending for state in self.report.sections.values())

    def on_snapshot(self, snapshot: ReportSnapshot) -> None:
        if self.report is None or snapshot.generation != self.report.generation:
            self.terminal = None
            self.error = None
        self.report = snapshot
        self.loading = not snapshot.is_terminal
        self._notify()

    def on_terminal(self, status: TerminalStatus) -> None:
        self.terminal = status
        self.loading = False
        if not status.ok:
            self.error = status.message
            if self.clear_on_error:
                self.report = None
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)


__all__ = ["ReportPresenter", "ReportViewState", "ViewListener"]
