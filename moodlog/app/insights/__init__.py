"""Streak, aggregation and calendar helpers for mood logs."""

from .aggregate import bucket_by_day, weekly_average
from .dates import days_between, is_today, to_day_key
from .models import DayBucket, MoodSample
from .service import MoodInsightsService, MoodSummary
from .streak import MAX_STREAK_DAYS, compute_streak, longest_streak

__all__ = [
    "MAX_STREAK_DAYS",
    "DayBucket",
    "MoodInsightsService",
    "MoodSample",
    "MoodSummary",
    "bucket_by_day",
    "compute_streak",
    "days_between",
    "is_today",
    "longest_streak",
    "to_day_key",
    "weekly_average",
]
