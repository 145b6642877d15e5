from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class MoodCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    note: str | None = Field(default=None, max_length=500)


class MoodEntryModel(BaseModel):
    id: int
    day: date
    rating: int
    note: str | None
    created_at: datetime
    updated_at: datetime
    editable: bool = False

    model_config = ConfigDict(from_attributes=True)


class MoodListResponse(BaseModel):
    items: list[MoodEntryModel]


class MoodSaveResponse(BaseModel):
    ok: bool = True
    id: int
    day: date
