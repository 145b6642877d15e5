from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./data/moodlog.db"

_ASYNC_DRIVERS = (
    ("postgres://", "postgresql+asyncpg://"),
    ("postgresql://", "postgresql+asyncpg://"),
    ("sqlite://", "sqlite+aiosqlite://"),
)


def normalize_database_url(raw_url: str | None) -> str:
    """Point sync or Heroku-style URLs at the async driver for the same backend."""

    if not raw_url:
        return DEFAULT_DATABASE_URL
    url = str(raw_url).strip()
    for prefix, replacement in _ASYNC_DRIVERS:
        if url.startswith(prefix):
            return replacement + url[len(prefix) :]
    return url


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    database_url: str = Field(
        default=DEFAULT_DATABASE_URL,
        alias="DATABASE_URL",
    )
    log_file: Path = Field(default=Path("logs/moodlog.log"))
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    request_timeout_seconds: float = Field(default=10.0, alias="REQUEST_TIMEOUT_SECONDS")

    # Reference calendar for day keys; empty means the host's local zone
    timezone: str | None = Field(default=None, alias="MOODLOG_TIMEZONE")

    # Quote generation
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    quote_model: str = Field(default="gpt-4o-mini", alias="QUOTE_MODEL")
    quote_max_tokens: int = Field(default=100, alias="QUOTE_MAX_TOKENS")
    quote_failure_threshold: int = Field(default=3, alias="QUOTE_FAILURE_THRESHOLD")

    version: str = Field(default_factory=lambda: Settings._load_version())

    @staticmethod
    def _load_version() -> str:
        version_env = os.getenv("VERSION")
        if version_env:
            return version_env
        version_file = Path("VERSION")
        if version_file.exists():
            return version_file.read_text(encoding="utf-8").strip()
        return "0.0.0"

    @field_validator("log_file", mode="before")
    @classmethod
    def _validate_log_file(cls, value: Path | str) -> Path:
        path = Path(value)
        if not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        return path

    @field_validator("timezone", mode="before")
    @classmethod
    def _validate_timezone(cls, value: str | None) -> str | None:
        if not value:
            return None
        name = str(value).strip()
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            return None
        return name

    @field_validator("request_timeout_seconds", mode="before")
    @classmethod
    def _validate_timeout(cls, value: float | str | None) -> float:
        if value is None:
            return 10.0
        return max(float(value), 1.0)

    @field_validator("quote_failure_threshold", mode="before")
    @classmethod
    def _validate_failure_threshold(cls, value: int | str | None) -> int:
        if value is None:
            return 3
        return max(int(value), 0)

    @field_validator("database_url", mode="before")
    @classmethod
    def _validate_database_url(cls, value: str | None) -> str:
        return normalize_database_url(value)

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: str | None) -> str:
        level = str(value or "INFO").strip().upper()
        return level if level in logging.getLevelNamesMapping() else "INFO"

    @property
    def tzinfo(self) -> ZoneInfo | None:
        return ZoneInfo(self.timezone) if self.timezone else None


@lru_cache
def get_settings() -> Settings:
    """Cached settings accessor."""

    return Settings()
