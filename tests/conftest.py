from __future__ import annotations

import asyncio
from collections.abc import Generator
from pathlib import Path
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from moodlog.app.core import config
from moodlog.db import create_engine, create_session_factory, init_db

OWNER = "owner-123"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def test_client(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> Generator[TestClient, None, None]:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("MOODLOG_TIMEZONE", raising=False)
    monkeypatch.setenv("VERSION", "0.1.0-test")
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "moodlog.log"))

    db_path = tmp_path / f"test_{uuid4().hex}.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    config.get_settings.cache_clear()

    from moodlog.app.main import app

    try:
        with TestClient(app) as client:
            client.headers.update({"X-Moodlog-Owner": OWNER})
            yield client
    finally:
        config.get_settings.cache_clear()


@pytest.fixture()
def temp_session_factory(tmp_path: Path):
    db_path = tmp_path / f"unit_{uuid4().hex}.db"
    database_url = f"sqlite+aiosqlite:///{db_path}"
    engine = create_engine(database_url)
    session_factory = create_session_factory(engine)
    asyncio.run(init_db(engine, session_factory, "test", database_url))
    # Drop pooled connections opened on the bootstrap loop
    asyncio.run(engine.dispose())
    try:
        yield session_factory
    finally:
        asyncio.run(engine.dispose())
