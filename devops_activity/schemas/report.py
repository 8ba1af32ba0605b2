"""
Immutable value types describing an activity report as it streams in.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

Duration = Union[int, float]

SECTION_NAMES: tuple[str, ...] = (
    "pullRequests",
    "prDiscussion",
    "builds",
    "releases",
    "workItems",
)


def freeze(value: Any) -> Any:
    """Return a read-only deep copy of a decoded JSON value."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of :func:`freeze`, producing plain JSON-compatible data."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw(item) for item in value]
    return value


class SectionStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SectionState:
    """State of one report section within a generation."""

    status: SectionStatus
    payload: Any = None
    error: Optional[str] = None

    @classmethod
    def pending(cls) -> "SectionState":
        return cls(SectionStatus.PENDING)

    @classmethod
    def ready(cls, payload: Any) -> "SectionState":
        return cls(SectionStatus.READY, payload=freeze(payload))

    @classmethod
    def failed(cls, message: str) -> "SectionState":
        return cls(SectionStatus.FAILED, error=message)

    @property
    def is_pending(self) -> bool:
        return self.status is SectionStatus.PENDING

    def to_dict(self) -> Any:
        if self.status is SectionStatus.READY:
            return thaw(self.payload)
        if self.status is SectionStatus.FAILED:
            return {"error": self.error}
        return None


@dataclass(frozen=True, slots=True)
class ReportMeta:
    """Timing metadata; provisional until the ``complete`` event arrives."""

    generated_at: str
    duration_ms: Optional[Duration] = None

    def to_dict(self) -> dict[str, Any]:
        meta: dict[str, Any] = {"generatedAt": self.generated_at}
        if self.duration_ms is not None:
            meta["durationMs"] = self.duration_ms
        return meta


class ReportStatus(str, Enum):
    STREAMING = "streaming"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ReportSnapshot:
    """Read-only view of a report generation handed to presenters."""

    generation: int
    sections: Mapping[str, SectionState]
    status: ReportStatus = ReportStatus.STREAMING
    meta: Optional[ReportMeta] = None
    error: Optional[str] = None

    def __getitem__(self, name: str) -> SectionState:
        return self.sections[name]

    @property
    def is_terminal(self) -> bool:
        return self.status is not ReportStatus.STREAMING

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON shape matching what the dashboard renders."""
        report: dict[str, Any] = {
            name: state.to_dict() for name, state in self.sections.items()
        }
        report["meta"] = self.meta.to_dict() if self.meta else None
        return report


@dataclass(frozen=True, slots=True)
class TerminalStatus:
    """Outcome of one generation, reported exactly once."""

    ok: bool
    generated_at: Optional[str] = None
    duration_ms: Optional[Duration] = None
    message: Optional[str] = None

    @classmethod
    def succeeded(cls, generated_at: str, duration_ms: Duration) -> "TerminalStatus":
        return cls(ok=True, generated_at=generated_at, duration_ms=duration_ms)

    @classmethod
    def failed(cls, message: str) -> "TerminalStatus":
        return cls(ok=False, message=message)

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {
                "ok": True,
                "generatedAt": self.generated_at,
                "durationMs": self.duration_ms,
            }
        return {"ok": False, "message": self.message}


__all__ = [
    "Duration",
    "ReportMeta",
    "ReportSnapshot",
    "ReportStatus",
    "SECTION_NAMES",
    "SectionState",
    "SectionStatus",
    "TerminalStatus",
    "freeze",
    "thaw",
]
