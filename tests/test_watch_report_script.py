"""Tests for the terminal report watcher."""

from __future__ import annotations

try:
    from . import _fakes
except Exception:  # pragma: no cover - fallback for direct execution
    import _fakes  # type: ignore

import json
from io import StringIO

import httpx
import pytest

from devops_activity.cli import watch_report

frame = _fakes.frame

REPORT_FRAMES = [
    frame("section", {"name": "builds", "data": {"totalBuilds": 5, "failed": 1}}),
    frame("section", {"name": "releases", "error": "Release API unavailable"}),
    frame("complete", {"generatedAt": "2024-01-01T00:00:00Z", "duration": 1200}),
]

CREDENTIAL_ARGS = ["--token", "token-abc", "--org", "org-42", "--log-level", "WARNING"]


def _client_for(chunks: list[str], seen: list[httpx.Request] | None = None) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return _fakes.event_stream_response(_fakes.ScriptedStream(chunks))

    return _fakes.mock_client(handler)


@pytest.fixture(autouse=True)
def _no_configured_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DEVOPS_API_TOKEN", raising=False)
    monkeypatch.delenv("DEVOPS_API_ORGANIZATION_ID", raising=False)


def test_prints_sections_and_completion() -> None:
    out = StringIO()

    exit_code = watch_report.main(CREDENTIAL_ARGS, client=_client_for(REPORT_FRAMES), out=out)

    lines = out.getvalue().splitlines()
    assert exit_code == watch_report.EXIT_OK
    assert len(lines) == 3
    assert "SECTION builds → READY | totalBuilds=5 failed=1" in lines[0]
    assert "SECTION releases → FAILED | error='Release API unavailable'" in lines[1]
    assert "COMPLETE generated_at=2024-01-01T00:00:00Z duration=1200ms" in lines[2]


def test_json_mode_prints_final_document() -> None:
    out = StringIO()

    exit_code = watch_report.main(
        [*CREDENTIAL_ARGS, "--json"], client=_client_for(REPORT_FRAMES), out=out
    )

    document = json.loads(out.getvalue())
    assert '"durationMs": 1200\n' in out.getvalue()
    assert exit_code == watch_report.EXIT_OK
    assert document["builds"] == {"totalBuilds": 5, "failed": 1}
    assert document["releases"] == {"error": "Release API unavailable"}
    assert document["pullRequests"] is None
    assert document["meta"] == {"generatedAt": "2024-01-01T00:00:00Z", "durationMs": 1200}
    assert document["status"]["ok"] is True


def test_custom_range_is_sent_in_utc() -> None:
    seen: list[httpx.Request] = []

    exit_code = watch_report.main(
        [
            *CREDENTIAL_ARGS,
            "--start",
            "2024-01-15T02:00:00+02:00",
            "--end",
            "2024-01-01T00:00:00Z",
        ],
        client=_client_for(REPORT_FRAMES, seen),
        out=StringIO(),
    )

    assert exit_code == watch_report.EXIT_OK
    assert seen[0].url.params["startDate"] == "2024-01-01T00:00:00.000Z"
    assert seen[0].url.params["endDate"] == "2024-01-15T00:00:00.000Z"


def test_server_error_event_exits_with_failure() -> None:
    out = StringIO()
    chunks = [frame("error", {"error": "Organization not configured"})]

    exit_code = watch_report.main(CREDENTIAL_ARGS, client=_client_for(chunks), out=out)

    assert exit_code == watch_report.EXIT_REPORT_FAILED
    assert "FAILED Organization not configured" in out.getvalue()


def test_missing_credentials_is_a_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = watch_report.main(["--token", "token-abc", "--log-level", "WARNING"])

    assert exit_code == watch_report.EXIT_USAGE_ERROR
    assert "Missing credentials" in capsys.readouterr().err


def test_credentials_fall_back_to_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEVOPS_API_TOKEN", "token-abc")
    monkeypatch.setenv("DEVOPS_API_ORGANIZATION_ID", "org-42")
    seen: list[httpx.Request] = []

    exit_code = watch_report.main(
        ["--log-level", "WARNING"], client=_client_for(REPORT_FRAMES, seen), out=StringIO()
    )

    assert exit_code == watch_report.EXIT_OK
    assert seen[0].headers["X-Organization-ID"] == "org-42"


@pytest.mark.parametrize(
    "range_args",
    [
        ["--start", "2024-01-01T00:00:00Z"],
        ["--start", "2023-01-01T00:00:00Z", "--end", "2024-01-01T00:00:00Z"],
        ["--start", "2024-01-01T00:00:00Z", "--end", "2999-01-01T00:00:00Z"],
    ],
)
def test_invalid_ranges_are_usage_errors(
    range_args: list[str], capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = watch_report.main([*CREDENTIAL_ARGS, *range_args])

    assert exit_code == watch_report.EXIT_USAGE_ERROR
    assert "Invalid request" in capsys.readouterr().err


def test_invalid_configuration_is_a_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEVOPS_STREAM_CONNECT_TIMEOUT_SECONDS", "-1")

    assert watch_report.main(CREDENTIAL_ARGS) == watch_report.EXIT_CONFIG_ERROR
