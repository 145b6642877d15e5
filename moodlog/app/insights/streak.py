from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta
from itertools import pairwise

from .dates import days_between
from .models import DatedRating

# Lookback bound for the current streak, one year of daily check-ins.
MAX_STREAK_DAYS = 365


def compute_streak(
    entries: Iterable[DatedRating],
    *,
    today: date,
    max_days: int = MAX_STREAK_DAYS,
) -> int:
    """Count consecutive logged days ending today or yesterday.

    Several entries on the same day count once. The result never exceeds
    ``max_days``.
    """

    logged_days = {entry.day for entry in entries}
    if not logged_days:
        return 0

    most_recent = max(logged_days)
    if days_between(most_recent, today) > 1:
        return 0

    streak = 1
    cursor = most_recent
    while streak < max_days:
        cursor -= timedelta(days=1)
        if cursor not in logged_days:
            break
        streak += 1
    return streak


def longest_streak(days: Iterable[date]) -> int:
    """Longest run of consecutive days anywhere in ``days``."""

    sorted_days = sorted(set(days))
    if not sorted_days:
        return 0
    streak = 1
    longest = 1
    for previous, current in pairwise(sorted_days):
        if current == previous + timedelta(days=1):
            streak += 1
            longest = max(longest, streak)
        else:
            streak = 1
    return longest
