"""
Pydantic models for the JSON payloads carried by report stream frames.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

DEFAULT_ERROR_MESSAGE = "Failed to generate report"


class SectionPayload(BaseModel):
    """Payload of a ``section`` event: one section's data or its failure."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)
    data: Any = None
    error: Optional[str] = None


class CompletePayload(BaseModel):
    """Payload of the ``complete`` event closing a generation."""

    model_config = ConfigDict(extra="ignore")

    generated_at: str = Field(..., alias="generatedAt", min_length=1)
    duration: Union[StrictInt, float] = Field(
        ..., description="Server-side generation time in ms, kept as sent."
    )

    @field_validator("duration")
    @classmethod
    def _non_negative(cls, value: Union[int, float]) -> Union[int, float]:
        if value < 0:
            raise ValueError("duration must not be negative")
        return value


class ErrorPayload(BaseModel):
    """Payload of a stream-level ``error`` event."""

    model_config = ConfigDict(extra="ignore")

    error: Optional[str] = None

    @property
    def message(self) -> str:
        return self.error or DEFAULT_ERROR_MESSAGE


__all__ = [
    "CompletePayload",
    "DEFAULT_ERROR_MESSAGE",
    "ErrorPayload",
    "SectionPayload",
]
