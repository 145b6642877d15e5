"""Database utilities for Moodlog."""

from .models import Base, MoodEntry, SettingEntry

__all__ = [
    "Base",
    "MoodEntry",
    "SettingEntry",
]
