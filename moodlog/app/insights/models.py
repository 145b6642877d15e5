from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Protocol


class DatedRating(Protocol):
    """Anything carrying a calendar day and a 1..5 rating."""

    @property
    def day(self) -> date: ...

    @property
    def rating(self) -> int: ...


@dataclass(frozen=True)
class MoodSample:
    """Read-only snapshot element handed to the insight calculators."""

    day: date
    rating: int


@dataclass(frozen=True)
class DayBucket:
    """One day of a chart window; ``average`` is None when nothing was logged."""

    day: date
    average: float | None
    count: int = 0

    @property
    def has_data(self) -> bool:
        return self.average is not None
