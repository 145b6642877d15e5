from __future__ import annotations

from .extractor import QuoteCandidate

FALLBACK_QUOTES: tuple[QuoteCandidate, ...] = (
    QuoteCandidate(
        "Your mental health is a priority. Your happiness is essential. "
        "Your self-care is a necessity.",
        "Unknown",
    ),
    QuoteCandidate(
        "Self-care is not selfish. You cannot serve from an empty vessel.",
        "Eleanor Brown",
    ),
    QuoteCandidate(
        "You don't have to be positive all the time. "
        "It's perfectly okay to feel sad, angry, or frustrated.",
        "Lori Deschene",
    ),
    QuoteCandidate("Be gentle with yourself, you're doing the best you can.", "Unknown"),
    QuoteCandidate(
        "You, yourself, as much as anybody in the entire universe, "
        "deserve your love and affection.",
        "Sharon Salzberg",
    ),
    QuoteCandidate(
        "Almost everything will work again if you unplug it for a few minutes, "
        "including you.",
        "Anne Lamott",
    ),
    QuoteCandidate("There is hope, even when your brain tells you there isn't.", "John Green"),
    QuoteCandidate(
        "Promise me you'll always remember: you're braver than you believe, "
        "and stronger than you seem, and smarter than you think.",
        "A. A. Milne",
    ),
)

QUOTE_PROMPT = (
    "Give me one short, real quote about mental health, wellness or self-care, "
    "under 100 characters, with its author. Reply only with JSON in the form "
    '{"quote": "...", "author": "..."} and nothing else.'
)
