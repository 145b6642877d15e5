"""Engine bootstrap and schema management for the mood log database."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import select
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from moodlog.app.core.config import normalize_database_url
from moodlog.app.db.models import Base, SettingEntry

logger = logging.getLogger(__name__)

PACKAGE_ROOT = Path(__file__).resolve().parent
SCHEMA_VERSION_KEY = "schema_version"


def is_memory_database(database_url: str) -> bool:
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def _ensure_sqlite_directory(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or is_memory_database(database_url):
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def create_engine(database_url: str | None) -> AsyncEngine:
    normalized = normalize_database_url(database_url)
    _ensure_sqlite_directory(normalized)
    return create_async_engine(normalized, echo=False)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


def alembic_config(database_url: str) -> Config:
    cfg = Config(str(PACKAGE_ROOT.parent / "alembic.ini"))
    cfg.set_main_option("script_location", str(PACKAGE_ROOT / "alembic"))
    # ConfigParser interpolation: a literal "%" in a password must be doubled
    cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return cfg


def upgrade_to_head(database_url: str) -> None:
    command.upgrade(alembic_config(database_url), "head")


async def _record_schema_version(
    session_factory: async_sessionmaker[AsyncSession],
    version: str,
) -> None:
    async with session_factory() as session:
        setting = await session.scalar(
            select(SettingEntry).where(SettingEntry.key == SCHEMA_VERSION_KEY)
        )
        if setting is None:
            session.add(SettingEntry(key=SCHEMA_VERSION_KEY, value=version))
        else:
            setting.value = version
        await session.commit()


async def init_db(
    engine: AsyncEngine,
    session_factory: async_sessionmaker[AsyncSession],
    version: str,
    database_url: str | None = None,
) -> None:
    """Bring the schema to head and record the running version.

    In-memory SQLite lives on a single connection that the migration
    thread cannot share, so its tables are built from the ORM metadata.
    Every other database is migrated with Alembic.
    """

    url = normalize_database_url(
        database_url or engine.url.render_as_string(hide_password=False)
    )
    if is_memory_database(url):
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    else:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, upgrade_to_head, url)

    await _record_schema_version(session_factory, version)
    logger.info(
        "database schema ready",
        extra={"extra_fields": {"schema_version": version, "backend": engine.dialect.name}},
    )


__all__ = [
    "create_engine",
    "create_session_factory",
    "init_db",
    "is_memory_database",
]
