from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, tzinfo

from ..services.storage import MoodLogStore
from . import dates
from .aggregate import (
    average_rating,
    bucket_by_day,
    describe_mood,
    is_improving,
    mood_distribution,
    weekly_average,
)
from .models import DayBucket, MoodSample
from .streak import compute_streak, longest_streak

logger = logging.getLogger(__name__)


@dataclass
class MoodSummary:
    start: date
    end: date
    entries_count: int
    mood_avg: float | None
    mood_label: str | None
    distribution: dict[int, int]
    streak_days: int
    longest_streak: int


class MoodInsightsService:
    """Load mood snapshots from the store and derive display values."""

    def __init__(
        self,
        store: MoodLogStore,
        *,
        tz: tzinfo | None = None,
        clock: Callable[[], date] | None = None,
    ) -> None:
        self._store = store
        self._tz = tz
        self._clock = clock or (lambda: dates.today(self._tz))

    def today(self) -> date:
        return self._clock()

    async def _samples(self, owner_id: str) -> list[MoodSample]:
        entries = await self._store.list_entries(owner_id)
        return [MoodSample(day=entry.day, rating=entry.rating) for entry in entries]

    async def _samples_between(self, owner_id: str, start: date, end: date) -> list[MoodSample]:
        entries = await self._store.list_entries_between(owner_id, start, end)
        return [MoodSample(day=entry.day, rating=entry.rating) for entry in entries]

    async def streak(self, owner_id: str) -> int:
        samples = await self._samples(owner_id)
        streak = compute_streak(samples, today=self.today())
        logger.debug("streak computed", extra={"extra_fields": {"streak": streak}})
        return streak

    async def current_week(self, owner_id: str) -> tuple[date, date, float | None, list[DayBucket]]:
        start, end = dates.week_bounds(self.today())
        samples = await self._samples_between(owner_id, start, end)
        return start, end, weekly_average(samples, start, end), bucket_by_day(samples, start, end)

    async def chart(self, owner_id: str, days: int = 7) -> tuple[list[DayBucket], bool]:
        start, end = dates.recent_window(self.today(), days)
        samples = await self._samples_between(owner_id, start, end)
        buckets = bucket_by_day(samples, start, end)
        return buckets, is_improving(buckets)

    async def summary(self, owner_id: str, days: int = 30) -> MoodSummary:
        today = self.today()
        start, end = dates.recent_window(today, days)
        all_samples = await self._samples(owner_id)
        window = [sample for sample in all_samples if start <= sample.day <= end]
        mood_avg = average_rating(window)
        return MoodSummary(
            start=start,
            end=end,
            entries_count=len(window),
            mood_avg=round(mood_avg, 2) if mood_avg is not None else None,
            mood_label=describe_mood(mood_avg),
            distribution=mood_distribution(window),
            streak_days=compute_streak(all_samples, today=today),
            longest_streak=longest_streak(sample.day for sample in window),
        )
