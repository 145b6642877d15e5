from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Iterable, Sequence
from datetime import date

from .dates import iter_days
from .models import DatedRating, DayBucket

RATING_SCALE = (1, 2, 3, 4, 5)

_MOOD_LABELS = (
    (1.5, "Feeling low"),
    (2.5, "Somewhat sad"),
    (3.5, "Neutral"),
    (4.5, "Quite happy"),
)


def _mean(values: Sequence[int]) -> float | None:
    if not values:
        return None
    return sum(values) / len(values)


def bucket_by_day(
    entries: Iterable[DatedRating],
    window_start: date,
    window_end: date,
) -> list[DayBucket]:
    """Average ratings per day for every day in the inclusive window.

    Days without entries get ``average=None`` so callers can tell missing
    data apart from a rating.
    """

    ratings_by_day: dict[date, list[int]] = defaultdict(list)
    for entry in entries:
        if window_start <= entry.day <= window_end:
            ratings_by_day[entry.day].append(entry.rating)

    buckets = []
    for day in iter_days(window_start, window_end):
        ratings = ratings_by_day.get(day, [])
        buckets.append(DayBucket(day=day, average=_mean(ratings), count=len(ratings)))
    return buckets


def weekly_average(
    entries: Iterable[DatedRating],
    week_start: date,
    week_end: date,
) -> float | None:
    """Mean rating inside ``[week_start, week_end]``, or None when empty."""

    ratings = [entry.rating for entry in entries if week_start <= entry.day <= week_end]
    return _mean(ratings)


def average_rating(entries: Iterable[DatedRating]) -> float | None:
    return _mean([entry.rating for entry in entries])


def mood_distribution(entries: Iterable[DatedRating]) -> dict[int, int]:
    counter = Counter(entry.rating for entry in entries)
    return {rating: counter.get(rating, 0) for rating in RATING_SCALE}


def describe_mood(value: float | None) -> str | None:
    if value is None:
        return None
    for threshold, label in _MOOD_LABELS:
        if value <= threshold:
            return label
    return "Very happy"


def is_improving(buckets: Sequence[DayBucket]) -> bool:
    """True when the latest logged day beats the earliest one in the window."""

    present = [bucket.average for bucket in buckets if bucket.average is not None]
    if len(present) < 2:
        return False
    return present[-1] > present[0]
