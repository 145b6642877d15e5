from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from ...core.security import resolve_owner
from ...db.models import MoodEntry
from ...insights import MoodInsightsService
from ...insights.dates import is_today
from ...metrics import MOOD_ENTRIES_SAVED
from ...quotes import QuoteService
from ...schemas.insights import (
    ChartResponse,
    DayBucketModel,
    StreakResponse,
    SummaryResponse,
    WeekResponse,
)
from ...schemas.mood import MoodCreate, MoodEntryModel, MoodListResponse, MoodSaveResponse
from ...schemas.quote import QuoteResponse
from ...services.storage import EntryLockedError, StorageService

router = APIRouter(prefix="/api/v1", tags=["core"])


def get_storage_service(request: Request) -> StorageService:
    return request.app.state.storage_service


def get_insights_service(request: Request) -> MoodInsightsService:
    return request.app.state.insights_service


def get_quote_service(request: Request) -> QuoteService:
    return request.app.state.quote_service


def _entry_model(entry: MoodEntry, today: date) -> MoodEntryModel:
    model = MoodEntryModel.model_validate(entry, from_attributes=True)
    model.editable = is_today(entry.day, today=today)
    return model


@router.post(
    "/moods",
    response_model=MoodSaveResponse,
    status_code=status.HTTP_201_CREATED,
)
async def save_today_mood(
    payload: MoodCreate,
    storage: StorageService = Depends(get_storage_service),
    insights: MoodInsightsService = Depends(get_insights_service),
    owner_id: str = Depends(resolve_owner),
) -> MoodSaveResponse:
    today = insights.today()
    entry = await storage.save_entry(
        owner_id=owner_id,
        day=today,
        rating=payload.rating,
        note=payload.note,
        today=today,
    )
    MOOD_ENTRIES_SAVED.labels(result="saved").inc()
    return MoodSaveResponse(id=entry.id, day=entry.day)


@router.get("/moods", response_model=MoodListResponse)
async def list_moods(
    storage: StorageService = Depends(get_storage_service),
    insights: MoodInsightsService = Depends(get_insights_service),
    owner_id: str = Depends(resolve_owner),
    limit: int = Query(default=30, ge=1, le=366),
) -> MoodListResponse:
    entries = await storage.list_entries(owner_id, limit=limit)
    today = insights.today()
    return MoodListResponse(items=[_entry_model(entry, today) for entry in entries])


@router.get("/moods/today", response_model=MoodEntryModel)
async def read_today_mood(
    storage: StorageService = Depends(get_storage_service),
    insights: MoodInsightsService = Depends(get_insights_service),
    owner_id: str = Depends(resolve_owner),
) -> MoodEntryModel:
    today = insights.today()
    entry = await storage.get_entry(owner_id, today)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="no entry yet")
    return _entry_model(entry, today)


@router.get("/moods/{day}", response_model=MoodEntryModel)
async def read_mood(
    day: date,
    storage: StorageService = Depends(get_storage_service),
    insights: MoodInsightsService = Depends(get_insights_service),
    owner_id: str = Depends(resolve_owner),
) -> MoodEntryModel:
    entry = await storage.get_entry(owner_id, day)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="no entry for day")
    return _entry_model(entry, insights.today())


@router.put("/moods/{day}", response_model=MoodSaveResponse)
async def save_mood_for_day(
    day: date,
    payload: MoodCreate,
    storage: StorageService = Depends(get_storage_service),
    insights: MoodInsightsService = Depends(get_insights_service),
    owner_id: str = Depends(resolve_owner),
) -> MoodSaveResponse:
    today = insights.today()
    if day > today:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="cannot log a future day",
        )
    try:
        entry = await storage.save_entry(
            owner_id=owner_id,
            day=day,
            rating=payload.rating,
            note=payload.note,
            today=today,
        )
    except EntryLockedError as exc:
        MOOD_ENTRIES_SAVED.labels(result="locked").inc()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    MOOD_ENTRIES_SAVED.labels(result="saved").inc()
    return MoodSaveResponse(id=entry.id, day=entry.day)


@router.get("/insights/streak", response_model=StreakResponse)
async def read_streak(
    insights: MoodInsightsService = Depends(get_insights_service),
    owner_id: str = Depends(resolve_owner),
) -> StreakResponse:
    streak = await insights.streak(owner_id)
    return StreakResponse(streak_days=streak, today=insights.today())


@router.get("/insights/week", response_model=WeekResponse)
async def read_current_week(
    insights: MoodInsightsService = Depends(get_insights_service),
    owner_id: str = Depends(resolve_owner),
) -> WeekResponse:
    week_start, week_end, mood_avg, buckets = await insights.current_week(owner_id)
    return WeekResponse(
        week_start=week_start,
        week_end=week_end,
        mood_avg=mood_avg,
        days=[DayBucketModel.model_validate(bucket, from_attributes=True) for bucket in buckets],
    )


@router.get("/insights/chart", response_model=ChartResponse)
async def read_chart(
    insights: MoodInsightsService = Depends(get_insights_service),
    owner_id: str = Depends(resolve_owner),
    days: int = Query(default=7, ge=1, le=90),
) -> ChartResponse:
    buckets, improving = await insights.chart(owner_id, days)
    return ChartResponse(
        days=[DayBucketModel.model_validate(bucket, from_attributes=True) for bucket in buckets],
        improving=improving,
    )


@router.get("/insights/summary", response_model=SummaryResponse)
async def read_summary(
    insights: MoodInsightsService = Depends(get_insights_service),
    owner_id: str = Depends(resolve_owner),
    days: int = Query(default=30, ge=1, le=365),
) -> SummaryResponse:
    summary = await insights.summary(owner_id, days)
    return SummaryResponse(
        start=summary.start,
        end=summary.end,
        entries_count=summary.entries_count,
        mood_avg=summary.mood_avg,
        mood_label=summary.mood_label,
        distribution=summary.distribution,
        streak_days=summary.streak_days,
        longest_streak=summary.longest_streak,
    )


@router.get("/quotes/next", response_model=QuoteResponse)
async def next_quote(
    quotes: QuoteService = Depends(get_quote_service),
) -> QuoteResponse:
    result = await quotes.next_quote()
    return QuoteResponse(quote=result.quote, author=result.author, source=result.source)
