"""Stream an activity report in the terminal, printing sections as they land.

Example usages::

    # Last 7 days using DEVOPS_API_TOKEN / DEVOPS_API_ORGANIZATION_ID from .env
    python -m devops_activity.cli.watch_report

    # Explicit window and credentials, final report printed as JSON
    python -m devops_activity.cli.watch_report --start 2024-01-01T00:00:00Z \
        --end 2024-01-15T00:00:00Z --token "$TOKEN" --org my-org --json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime
from typing import Dict, Optional, TextIO

import httpx
from pydantic import ValidationError

from devops_activity.core.config import AppSettings, load_settings
from devops_activity.core.errors import DateRangeError, SettingsLoadError
from devops_activity.core.logging import configure_logging
from devops_activity.dependencies import create_report_controller, get_default_credentials
from devops_activity.schemas.report import (
    ReportSnapshot,
    SectionState,
    SectionStatus,
    TerminalStatus,
)
from devops_activity.schemas.request import DateRange, RangePreset, ReportCredentials

EXIT_OK = 0
EXIT_REPORT_FAILED = 1
EXIT_USAGE_ERROR = 2
EXIT_CONFIG_ERROR = 3


def _timestamp() -> str:
    return datetime.now().strftime("%H:%M:%S")


def _parse_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid ISO-8601 timestamp: {value!r}") from exc


def _summarize(state: SectionState) -> str:
    if state.status is SectionStatus.FAILED:
        return f"error='{state.error}'"
    payload = state.to_dict()
    if isinstance(payload, dict):
        scalars = {
            key: value
            for key, value in payload.items()
            if isinstance(value, (int, float, str, bool))
        }
        return " ".join(f"{key}={value}" for key, value in scalars.items()) or "(no totals)"
    return json.dumps(payload)


class ConsoleReportPresenter:
    """Print each section once it changes and the generation's outcome."""

    def __init__(self, *, out: TextIO = sys.stdout, as_json: bool = False) -> None:
        self._out = out
        self._as_json = as_json
        self._seen: Dict[str, SectionState] = {}
        self._latest: Optional[ReportSnapshot] = None
        self.status: Optional[TerminalStatus] = None

    def _print(self, line: str) -> None:
        print(line, file=self._out)

    def on_snapshot(self, snapshot: ReportSnapshot) -> None:
        self._latest = snapshot
        if self._as_json:
            return
        for name, state in snapshot.sections.items():
            if state.is_pending or self._seen.get(name) == state:
                continue
            self._seen[name] = state
            self._print(
                f"[{_timestamp()}] SECTION {name} → {state.status.value.upper()}"
                f" | {_summarize(state)}"
            )

    def on_terminal(self, status: TerminalStatus) -> None:
        self.status = status
        if self._as_json:
            document = self._latest.to_dict() if self._latest else {}
            document["status"] = status.to_dict()
            self._print(json.dumps(document, indent=2))
            return
        if status.ok:
            self._print(
                f"[{_timestamp()}] COMPLETE generated_at={status.generated_at}"
                f" duration={status.duration_ms}ms"
            )
        else:
            self._print(f"[{_timestamp()}] FAILED {status.message}")


def _build_parser(settings: AppSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Stream the DevOps activity report and print sections as they complete."
    )
    parser.add_argument(
        "--range",
        dest="preset",
        default=settings.stream.default_range,
        choices=[preset.value for preset in RangePreset],
        help="Quick range ending now (default: %(default)s).",
    )
    parser.add_argument("--start", type=_parse_datetime, help="Custom range start (ISO-8601).")
    parser.add_argument("--end", type=_parse_datetime, help="Custom range end (ISO-8601).")
    parser.add_argument("--token", default=None, help="Bearer token (default: DEVOPS_API_TOKEN).")
    parser.add_argument(
        "--org",
        default=None,
        help="Organization id (default: DEVOPS_API_ORGANIZATION_ID).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print only the final report as JSON.",
    )
    parser.add_argument("--log-level", default=settings.log_level)
    return parser


def _resolve_range(args: argparse.Namespace) -> DateRange:
    if args.start or args.end:
        if not (args.start and args.end):
            raise DateRangeError("Both --start and --end are required for a custom range.")
        return DateRange.custom(args.start, args.end)
    return DateRange.last(args.preset)


def _resolve_credentials(
    args: argparse.Namespace, settings: AppSettings
) -> ReportCredentials | None:
    if not args.token and not args.org:
        return get_default_credentials(settings)
    token = args.token or settings.api.token
    organization = args.org or settings.api.organization_id
    if not token or not organization:
        return None
    return ReportCredentials(token=token, organization_id=organization)


async def _stream(
    settings: AppSettings,
    presenter: ConsoleReportPresenter,
    date_range: DateRange,
    credentials: ReportCredentials,
    client: httpx.AsyncClient | None,
) -> None:
    async with create_report_controller(
        presenter, settings=settings, client=client
    ) as controller:
        await controller.run(date_range, credentials)


def main(
    argv: list[str] | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    out: TextIO = sys.stdout,
) -> int:
    try:
        settings = load_settings()
    except SettingsLoadError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_CONFIG_ERROR

    args = _build_parser(settings).parse_args(argv)
    configure_logging(args.log_level)

    try:
        date_range = _resolve_range(args).ensure_valid()
        credentials = _resolve_credentials(args, settings)
    except (DateRangeError, ValidationError) as exc:
        print(f"Invalid request: {exc}", file=sys.stderr)
        return EXIT_USAGE_ERROR
    if credentials is None:
        print(
            "Missing credentials. Pass --token and --org or set "
            "DEVOPS_API_TOKEN and DEVOPS_API_ORGANIZATION_ID.",
            file=sys.stderr,
        )
        return EXIT_USAGE_ERROR

    presenter = ConsoleReportPresenter(out=out, as_json=args.json)
    asyncio.run(_stream(settings, presenter, date_range, credentials, client))

    if presenter.status is None or not presenter.status.ok:
        return EXIT_REPORT_FAILED
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - manual execution path
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nStopped watching.")
