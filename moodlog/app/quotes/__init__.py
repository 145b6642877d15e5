"""Affirmation quotes: extraction from generated text and the fallback pool."""

from .extractor import QuoteCandidate, extract_quote, parse_generated_quote
from .fallback import FALLBACK_QUOTES
from .service import QuoteResult, QuoteService, RecentQuotes

__all__ = [
    "FALLBACK_QUOTES",
    "QuoteCandidate",
    "QuoteResult",
    "QuoteService",
    "RecentQuotes",
    "extract_quote",
    "parse_generated_quote",
]
