from __future__ import annotations

from devops_activity.schemas.report import TerminalStatus
from devops_activity.services.report_aggregator import SectionAggregator
from devops_activity.services.report_view import ReportViewState
from devops_activity.stream.parser import CompleteEvent, ErrorEvent, SectionEvent


def test_new_generation_shows_loading_with_empty_sections() -> None:
    view = ReportViewState()
    aggregator = SectionAggregator()

    view.on_snapshot(aggregator.reset())

    assert view.loading
    assert view.report is not None
    assert not view.has_data
    assert view.error is None


def test_partial_report_is_visible_while_loading() -> None:
    view = ReportViewState()
    aggregator = SectionAggregator()
    view.on_snapshot(aggregator.reset())

    view.on_snapshot(aggregator.apply(SectionEvent(name="builds", data={"totalBuilds": 5})))

    assert view.loading
    assert view.has_data
    assert view.report["builds"].payload == {"totalBuilds": 5}


def test_completion_stops_loading() -> None:
    view = ReportViewState()
    aggregator = SectionAggregator()
    view.on_snapshot(aggregator.reset())

    complete = CompleteEvent(generated_at="2024-01-01T00:00:00Z", duration_ms=10)
    view.on_snapshot(aggregator.apply(complete))
    view.on_terminal(TerminalStatus.succeeded("2024-01-01T00:00:00Z", 10))

    assert not view.loading
    assert view.terminal.ok
    assert view.error is None


def test_failure_keeps_partial_report_by_default() -> None:
    view = ReportViewState()
    aggregator = SectionAggregator()
    view.on_snapshot(aggregator.reset())
    view.on_snapshot(aggregator.apply(SectionEvent(name="releases", data={"total": 2})))

    view.on_snapshot(aggregator.apply(ErrorEvent(message="Organization not configured")))
    view.on_terminal(TerminalStatus.failed("Organization not configured"))

    assert view.error == "Organization not configured"
    assert not view.loading
    assert view.report["releases"].payload == {"total": 2}


def test_failure_can_clear_the_report() -> None:
    view = ReportViewState(clear_on_error=True)
    aggregator = SectionAggregator()
    view.on_snapshot(aggregator.reset())
    view.on_snapshot(aggregator.apply(SectionEvent(name="releases", data={"total": 2})))

    view.on_terminal(TerminalStatus.failed("boom"))

    assert view.report is None
    assert not view.has_data
    assert view.error == "boom"


def test_restart_clears_previous_error() -> None:
    view = ReportViewState()
    aggregator = SectionAggregator()
    view.on_snapshot(aggregator.reset())
    view.on_terminal(TerminalStatus.failed("boom"))

    view.on_snapshot(aggregator.reset())

    assert view.error is None
    assert view.terminal is None
    assert view.loading


def test_listeners_are_notified_until_unsubscribed() -> None:
    view = ReportViewState()
    aggregator = SectionAggregator()
    seen: list[bool] = []
    unsubscribe = view.subscribe(lambda state: seen.append(state.loading))

    view.on_snapshot(aggregator.reset())
    view.on_terminal(TerminalStatus.failed("boom"))
    unsubscribe()
    view.on_snapshot(aggregator.reset())

    assert seen == [True, False]
