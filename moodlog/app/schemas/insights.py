from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field


class DayBucketModel(BaseModel):
    day: date
    average: float | None = None
    count: int = Field(ge=0)


class StreakResponse(BaseModel):
    streak_days: int = Field(ge=0)
    today: date


class WeekResponse(BaseModel):
    week_start: date
    week_end: date
    mood_avg: float | None = None
    days: list[DayBucketModel]


class ChartResponse(BaseModel):
    days: list[DayBucketModel]
    improving: bool


class SummaryResponse(BaseModel):
    start: date
    end: date
    entries_count: int
    mood_avg: float | None = None
    mood_label: str | None = None
    distribution: dict[int, int]
    streak_days: int
    longest_streak: int


__all__ = [
    "ChartResponse",
    "DayBucketModel",
    "StreakResponse",
    "SummaryResponse",
    "WeekResponse",
]
