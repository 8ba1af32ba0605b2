"""
Application configuration models and helpers.

Centralizes settings management so the stream controller, the dependency
factories and the command line tools share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import os

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from devops_activity.core.errors import SettingsLoadError


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file into the environment."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class ApiSettings(BaseSettings):
    """Connection details for the dashboard REST API."""

    model_config = SettingsConfigDict(env_prefix="DEVOPS_API_", extra="ignore")

    base_url: str = Field("http://localhost:3001")
    token: Optional[str] = Field(
        None,
        description="Bearer token used by command line tools when none is supplied.",
    )
    organization_id: Optional[str] = Field(
        None,
        description="Organization scope used by command line tools when none is supplied.",
    )
    organization_header: str = Field("X-Organization-ID")

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        stripped = value.strip().rstrip("/")
        if not stripped:
            raise ValueError("base_url must not be blank")
        return stripped


class StreamSettings(BaseSettings):
    """Tuning for the activity report event stream."""

    model_config = SettingsConfigDict(env_prefix="DEVOPS_STREAM_", extra="ignore")

    path: str = Field("/api/dashboard/activity-report/stream")
    connect_timeout_seconds: float = Field(10.0, gt=0)
    read_timeout_seconds: Optional[float] = Field(
        300.0,
        gt=0,
        description="Longest silence tolerated between chunks; sections can be slow.",
    )
    default_range: str = Field("7d")

    @field_validator("path")
    @classmethod
    def _ensure_leading_slash(cls, value: str) -> str:
        value = value.strip()
        return value if value.startswith("/") else f"/{value}"


class AppSettings(BaseSettings):
    """Root settings object for the activity report client."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    api: ApiSettings = Field(default_factory=ApiSettings)
    stream: StreamSettings = Field(default_factory=StreamSettings)

    @property
    def stream_url(self) -> str:
        return f"{self.api.base_url}{self.stream.path}"


def load_settings() -> AppSettings:
    """Load settings, wrapping validation failures in ``SettingsLoadError``."""
    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return load_settings()


__all__ = [
    "ApiSettings",
    "AppSettings",
    "StreamSettings",
    "get_settings",
    "load_settings",
]
