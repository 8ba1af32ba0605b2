"""
Pydantic models describing what a caller supplies to start a report stream.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from devops_activity.core.errors import DateRangeError

MAX_RANGE_DAYS = 90


class RangePreset(str, Enum):
    """Quick ranges offered by the dashboard range picker."""

    HOURS_12 = "12h"
    DAY_1 = "1d"
    DAYS_7 = "7d"
    DAYS_15 = "15d"
    DAYS_30 = "30d"

    @property
    def hours(self) -> int:
        return _PRESET_HOURS[self]


_PRESET_HOURS: dict[RangePreset, int] = {
    RangePreset.HOURS_12: 12,
    RangePreset.DAY_1: 24,
    RangePreset.DAYS_7: 24 * 7,
    RangePreset.DAYS_15: 24 * 15,
    RangePreset.DAYS_30: 24 * 30,
}


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with millisecond precision."""
    rendered = _utc(value).isoformat(timespec="milliseconds")
    return rendered.replace("+00:00", "Z")


class DateRange(BaseModel):
    """Inclusive reporting window; naive timestamps are treated as UTC."""

    model_config = ConfigDict(frozen=True)

    start: datetime = Field(..., description="Beginning of the reporting window.")
    end: datetime = Field(..., description="End of the reporting window.")

    @field_validator("start", "end")
    @classmethod
    def _normalize_timezone(cls, value: datetime) -> datetime:
        return _utc(value)

    @classmethod
    def last(
        cls, preset: RangePreset | str = RangePreset.DAYS_7, *, now: datetime | None = None
    ) -> "DateRange":
        """Build the range covering ``preset`` and ending now."""
        try:
            resolved = RangePreset(preset)
        except ValueError as exc:
            choices = ", ".join(item.value for item in RangePreset)
            raise DateRangeError(
                f"Unknown range preset {preset!r}; expected one of {choices}."
            ) from exc
        end = _utc(now or datetime.now(timezone.utc))
        return cls(start=end - timedelta(hours=resolved.hours), end=end)

    @classmethod
    def custom(cls, first: datetime, second: datetime) -> "DateRange":
        """Build a range from two picked dates in either order."""
        first, second = _utc(first), _utc(second)
        if second < first:
            first, second = second, first
        return cls(start=first, end=second)

    @property
    def span_days(self) -> int:
        """Length of the range in whole days, rounded up."""
        seconds = abs((self.end - self.start).total_seconds())
        return math.ceil(seconds / 86400)

    def ensure_valid(self, *, now: datetime | None = None) -> "DateRange":
        """Reject ranges the report endpoint should never be asked for."""
        current = _utc(now or datetime.now(timezone.utc))
        if self.end < self.start:
            raise DateRangeError("End date must not be before the start date.")
        if self.end > current:
            raise DateRangeError("End date cannot be in the future.")
        if self.span_days > MAX_RANGE_DAYS:
            raise DateRangeError(f"Please select {MAX_RANGE_DAYS} days or less.")
        return self

    def query_params(self) -> dict[str, str]:
        return {
            "startDate": format_timestamp(self.start),
            "endDate": format_timestamp(self.end),
        }


class ReportCredentials(BaseModel):
    """Identity attached to the stream request."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., min_length=1, description="Bearer token for the API.")
    organization_id: str = Field(
        ..., min_length=1, description="Tenant sent in the organization-scope header."
    )

    @field_validator("token", "organization_id")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("value must not be blank")
        return stripped


__all__ = [
    "DateRange",
    "MAX_RANGE_DAYS",
    "RangePreset",
    "ReportCredentials",
    "format_timestamp",
]
