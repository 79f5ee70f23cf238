"""Typed application settings with Pydantic validation."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import tomllib
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)


DEFAULT_API_URL = "http://localhost:8123"
DEFAULT_DEV_API_URL = "http://localhost:2024"
DEFAULT_ASSISTANT_ID = "agent"
DEFAULT_MESSAGES_KEY = "messages"
DEFAULT_EFFORT = "medium"
DEFAULT_REASONING_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT_SECONDS = 300.0


def _normalise_url(value: str | None, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip().rstrip("/")
    return text or default


class StreamSettings(BaseModel):
    """Settings for connecting to the research agent server."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    api_url: str = Field(DEFAULT_API_URL, alias="base_url")
    dev_api_url: str = DEFAULT_DEV_API_URL
    use_dev_server: bool = False
    assistant_id: str = DEFAULT_ASSISTANT_ID
    messages_key: str = DEFAULT_MESSAGES_KEY
    api_key: str | None = None
    timeout_seconds: float = Field(DEFAULT_TIMEOUT_SECONDS, gt=0)

    @field_validator("api_url", mode="before")
    @classmethod
    def _normalise_api_url(cls, value: str | None) -> str:
        """Strip trailing slashes and fall back to the production endpoint."""
        return _normalise_url(value, DEFAULT_API_URL)

    @field_validator("dev_api_url", mode="before")
    @classmethod
    def _normalise_dev_api_url(cls, value: str | None) -> str:
        return _normalise_url(value, DEFAULT_DEV_API_URL)

    @field_validator("assistant_id", "messages_key", mode="before")
    @classmethod
    def _require_identifier(cls, value: str | None, info: ValidationInfo) -> str:
        defaults = {
            "assistant_id": DEFAULT_ASSISTANT_ID,
            "messages_key": DEFAULT_MESSAGES_KEY,
        }
        if value is None:
            return defaults[info.field_name]
        text = str(value).strip()
        return text or defaults[info.field_name]

    @field_validator("api_key", mode="before")
    @classmethod
    def _normalise_api_key(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def resolve_api_url(self, *, dev: bool | None = None) -> str:
        """Return the endpoint for the development or production server."""
        use_dev = self.use_dev_server if dev is None else dev
        return self.dev_api_url if use_dev else self.api_url


class ResearchSettings(BaseModel):
    """Defaults applied when a turn is submitted without explicit options."""

    model_config = ConfigDict(validate_assignment=True)

    # Free text, stored as given: unknown or differently cased levels reach the
    # budget deriver unchanged and yield zero budgets there.
    effort: str = DEFAULT_EFFORT
    reasoning_model: str = DEFAULT_REASONING_MODEL

    @field_validator("effort", mode="before")
    @classmethod
    def _default_effort(cls, value: str | None) -> str:
        if value is None:
            return DEFAULT_EFFORT
        return str(value)

    @field_validator("reasoning_model", mode="before")
    @classmethod
    def _normalise_model(cls, value: str | None) -> str:
        if value is None:
            return DEFAULT_REASONING_MODEL
        text = str(value).strip()
        return text or DEFAULT_REASONING_MODEL


class UISettings(BaseModel):
    """Settings related to terminal presentation."""

    model_config = ConfigDict(validate_assignment=True)

    language: str | None = None
    log_level: int = Field(default=logging.WARNING)

    @field_validator("language", mode="before")
    @classmethod
    def _normalise_language(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        return text or None


class AppSettings(BaseModel):
    """Aggregate settings for the application."""

    model_config = ConfigDict(validate_assignment=True)

    stream: StreamSettings = Field(default_factory=StreamSettings)
    research: ResearchSettings = Field(default_factory=ResearchSettings)
    ui: UISettings = Field(default_factory=UISettings)


def load_app_settings(path: str | Path) -> AppSettings:
    """Load :class:`AppSettings` from *path* with validation.

    Format is detected by file extension: ``.toml`` uses :mod:`tomllib`,
    everything else is treated as JSON.  Any validation errors are wrapped into
    :class:`ValueError` with a human-friendly message.
    """
    p = Path(path)
    with p.open("rb") as fh:
        data = tomllib.load(fh) if p.suffix.lower() == ".toml" else json.load(fh)
    try:
        return AppSettings.model_validate(data)
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc
