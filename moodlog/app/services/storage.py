from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from typing import Protocol

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import async_sessionmaker

from ..core.security import hash_identifier
from ..db.models import MoodEntry, SettingEntry

logger = logging.getLogger(__name__)


class EntryLockedError(Exception):
    """Raised when a write targets a day that is already in the past."""

    def __init__(self, day: date) -> None:
        super().__init__(f"mood entry for {day.isoformat()} is locked")
        self.day = day


class MoodLogStore(Protocol):
    """Persistence contract the insight code depends on."""

    async def get_entry(self, owner_id: str, day: date) -> MoodEntry | None: ...

    async def list_entries_between(
        self, owner_id: str, start: date, end: date
    ) -> Sequence[MoodEntry]: ...

    async def list_entries(
        self, owner_id: str, *, limit: int | None = None
    ) -> Sequence[MoodEntry]: ...

    async def save_entry(
        self,
        *,
        owner_id: str,
        day: date,
        rating: int,
        note: str | None,
        today: date,
    ) -> MoodEntry: ...


class StorageService:
    """Persist mood entries keyed by owner and calendar day."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def healthcheck(self) -> None:
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))

    # -- settings helpers ------------------------------------------------
    async def get_setting(self, key: str) -> str | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(SettingEntry).where(SettingEntry.key == key)
            )
            entry = result.scalar_one_or_none()
            return entry.value if entry else None

    # -- mood entries ----------------------------------------------------
    async def get_entry(self, owner_id: str, day: date) -> MoodEntry | None:
        """Return the entry for ``day`` or None when nothing was logged."""

        async with self._session_factory() as session:
            return await session.scalar(
                select(MoodEntry)
                .where(MoodEntry.owner_id == owner_id)
                .where(MoodEntry.day == day)
            )

    async def list_entries_between(
        self,
        owner_id: str,
        start: date,
        end: date,
    ) -> Sequence[MoodEntry]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(MoodEntry)
                .where(
                    MoodEntry.owner_id == owner_id,
                    MoodEntry.day >= start,
                    MoodEntry.day <= end,
                )
                .order_by(MoodEntry.day.desc())
            )
            return list(result.scalars().all())

    async def list_entries(
        self,
        owner_id: str,
        *,
        limit: int | None = None,
    ) -> Sequence[MoodEntry]:
        query = (
            select(MoodEntry)
            .where(MoodEntry.owner_id == owner_id)
            .order_by(MoodEntry.day.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        async with self._session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def save_entry(
        self,
        *,
        owner_id: str,
        day: date,
        rating: int,
        note: str | None,
        today: date,
    ) -> MoodEntry:
        """Insert or overwrite the entry for ``day``; past days are locked."""

        if day < today:
            raise EntryLockedError(day)
        async with self._session_factory() as session:
            entry = await session.scalar(
                select(MoodEntry)
                .where(MoodEntry.owner_id == owner_id)
                .where(MoodEntry.day == day)
            )
            if entry is None:
                entry = MoodEntry(owner_id=owner_id, day=day, rating=rating, note=note)
                session.add(entry)
                logger.info("mood entry created", extra={"owner": hash_identifier(owner_id)})
            else:
                entry.rating = rating
                entry.note = note
                logger.info("mood entry updated", extra={"owner": hash_identifier(owner_id)})
            await session.commit()
            await session.refresh(entry)
            return entry


__all__ = ["EntryLockedError", "MoodLogStore", "StorageService"]
