from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from moodlog.app.db import MoodEntry, SettingEntry


@pytest.mark.anyio
async def test_mood_entry_crud(temp_session_factory):
    session_factory = temp_session_factory

    async with session_factory() as session:
        entry = MoodEntry(owner_id="owner-a", day=date(2024, 1, 2), rating=4, note="sunny")
        session.add(entry)
        await session.commit()
        await session.refresh(entry)

        assert entry.id > 0
        assert entry.created_at is not None

    async with session_factory() as session:
        entries = (await session.execute(select(MoodEntry))).scalars().all()
        assert [(item.day, item.rating) for item in entries] == [(date(2024, 1, 2), 4)]


@pytest.mark.anyio
async def test_mood_entry_unique_per_owner_and_day(temp_session_factory):
    session_factory = temp_session_factory

    async with session_factory() as session:
        session.add(MoodEntry(owner_id="owner-a", day=date(2024, 1, 2), rating=4))
        session.add(MoodEntry(owner_id="owner-b", day=date(2024, 1, 2), rating=2))
        await session.commit()

    async with session_factory() as session:
        session.add(MoodEntry(owner_id="owner-a", day=date(2024, 1, 2), rating=1))
        with pytest.raises(IntegrityError):
            await session.commit()


@pytest.mark.anyio
async def test_setting_entry_unique_key(temp_session_factory):
    session_factory = temp_session_factory

    async with session_factory() as session:
        session.add(SettingEntry(key="theme", value="light"))
        await session.commit()

    async with session_factory() as session:
        query = select(SettingEntry).where(SettingEntry.key == "theme")
        result = await session.execute(query)
        setting = result.scalar_one()
        setting.value = "dark"
        await session.commit()

    async with session_factory() as session:
        query = select(SettingEntry).where(SettingEntry.key == "theme")
        setting = (await session.execute(query)).scalar_one()
        assert setting.value == "dark"
