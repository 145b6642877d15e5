from __future__ import annotations

from pathlib import Path

import pytest

from moodlog.app.core import config
from moodlog.app.core.config import get_settings


@pytest.fixture(autouse=True)
def reset_settings_cache() -> None:
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


def test_settings_read_version_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("VERSION", "9.9.9")
    monkeypatch.setenv("MOODLOG_TIMEZONE", "Europe/Berlin")
    monkeypatch.chdir(tmp_path)

    settings = get_settings()

    assert settings.version == "9.9.9"
    assert settings.timezone == "Europe/Berlin"
    assert settings.tzinfo is not None
    assert settings.log_file.parent.exists()


def test_settings_fallback_to_version_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    version_file = tmp_path / "VERSION"
    version_file.write_text("1.2.3", encoding="utf-8")
    monkeypatch.delenv("VERSION", raising=False)
    monkeypatch.chdir(tmp_path)

    settings = get_settings()

    assert settings.version == "1.2.3"
    assert settings.log_file.parent.exists()


def test_unknown_timezone_falls_back_to_host(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("MOODLOG_TIMEZONE", "Mars/Olympus_Mons")
    monkeypatch.chdir(tmp_path)

    settings = get_settings()

    assert settings.timezone is None
    assert settings.tzinfo is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("postgres://u:p@db:5432/mood", "postgresql+asyncpg://u:p@db:5432/mood"),
        ("postgresql://u:p@db/mood", "postgresql+asyncpg://u:p@db/mood"),
        ("sqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
    ],
)
def test_database_url_is_normalized(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, raw: str, expected: str
) -> None:
    monkeypatch.setenv("DATABASE_URL", raw)
    monkeypatch.chdir(tmp_path)

    assert get_settings().database_url == expected


def test_quote_settings_are_clamped(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "0.2")
    monkeypatch.setenv("QUOTE_FAILURE_THRESHOLD", "-4")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)

    settings = get_settings()

    assert settings.request_timeout_seconds == 1.0
    assert settings.quote_failure_threshold == 0
    assert settings.openai_api_key is None
    assert settings.quote_model == "gpt-4o-mini"


@pytest.mark.parametrize(("raw", "expected"), [("warning", "WARNING"), ("loud", "INFO")])
def test_log_level_is_validated(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, raw: str, expected: str
) -> None:
    monkeypatch.setenv("LOG_LEVEL", raw)
    monkeypatch.chdir(tmp_path)

    assert get_settings().log_level == expected
