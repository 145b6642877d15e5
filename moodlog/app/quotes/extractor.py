# ruff: noqa: RUF001

"""Best-effort splitting of generated text into a quote and its author.

Generated replies come back in whatever shape the model chose, so the
extractor runs an ordered chain of independent matchers and keeps the first
one that yields both parts. The order is a priority list, later matchers are
less precise.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown"

_QUOTE_MARKS = "\"'“”‘’«»"
# Last emphasis pair wins; the author may not contain markers
_EMPHASIS_RE = re.compile(r"^(.*?)\s*(\*\*|__)((?:(?!\*\*|__).)+)\2\s*$", re.DOTALL)
_DASH_SEPARATOR_RE = re.compile(r"\s+-\s+|\s*[–—]\s*")
_QUOTED_ATTRIBUTION_RE = re.compile(
    r"^[\"'“‘«](.+?)[\"'”’»]\s*[-–—]\s*(.+)$",
    re.DOTALL,
)
_BY_RE = re.compile(r"^(.+)\s+by\s+(.+)$", re.IGNORECASE | re.DOTALL)
_FROM_RE = re.compile(r"^(.+)\s+from\s+(.+)$", re.IGNORECASE | re.DOTALL)
_SENTENCE_RE = re.compile(r"^(.*?[.!?])\s+(.+)$", re.DOTALL)
_TERMINAL_PUNCTUATION = (".", "!", "?")
_AUTHOR_LINE_MAX = 50
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_JSON_QUOTE_RE = re.compile(r'"quote"\s*:\s*"([^"]*)"')
_JSON_AUTHOR_RE = re.compile(r'"author"\s*:\s*"([^"]*)"')

Match = tuple[str, str]


@dataclass(frozen=True)
class QuoteCandidate:
    quote: str
    author: str


def match_emphasis(text: str) -> Match | None:
    """``Quote **Author**`` or ``Quote __Author__``."""

    match = _EMPHASIS_RE.match(text)
    if not match:
        return None
    return match.group(1), match.group(3)


def match_dash(text: str) -> Match | None:
    """``Quote - Author`` with hyphen, en dash or em dash; last separator wins."""

    separators = list(_DASH_SEPARATOR_RE.finditer(text))
    if not separators:
        return None
    last = separators[-1]
    return text[: last.start()], text[last.end() :]


def match_quoted_attribution(text: str) -> Match | None:
    """``"Quote"-Author`` where the quote is wrapped in quotation marks."""

    match = _QUOTED_ATTRIBUTION_RE.match(text)
    if not match:
        return None
    return match.group(1), match.group(2)


def match_by_or_from(text: str) -> Match | None:
    """``Quote by Author`` / ``Quote from Author``, case-insensitive."""

    for pattern in (_BY_RE, _FROM_RE):
        match = pattern.match(text)
        if match:
            return match.group(1), match.group(2)
    return None


def match_sentence_boundary(text: str) -> Match | None:
    """First sentence is the quote, the remainder is the author."""

    match = _SENTENCE_RE.match(text)
    if not match:
        return None
    return match.group(1), match.group(2)


def match_last_line(text: str) -> Match | None:
    """A short trailing line without terminal punctuation is the author."""

    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if len(lines) < 2:
        return None
    last_line = lines[-1]
    if len(last_line) >= _AUTHOR_LINE_MAX or last_line.endswith(_TERMINAL_PUNCTUATION):
        return None
    return " ".join(lines[:-1]), last_line.lstrip("-–— ")


def match_last_hyphen(text: str) -> Match | None:
    index = text.rfind("-")
    if index <= 0:
        return None
    return text[:index], text[index + 1 :]


STRATEGIES: tuple[tuple[str, Callable[[str], Match | None]], ...] = (
    ("emphasis", match_emphasis),
    ("dash", match_dash),
    ("quoted_attribution", match_quoted_attribution),
    ("by_or_from", match_by_or_from),
    ("sentence_boundary", match_sentence_boundary),
    ("last_line", match_last_line),
    ("last_hyphen", match_last_hyphen),
)


def _clean_quote(value: str) -> str:
    return value.strip().strip(_QUOTE_MARKS).strip()


def extract_quote(raw: str | None) -> QuoteCandidate:
    """Split ``raw`` into quote and author; never raises.

    Falls back to the whole trimmed text with an ``Unknown`` author.
    """

    text = (raw or "").strip()
    for name, strategy in STRATEGIES:
        match = strategy(text)
        if match is None:
            continue
        quote = _clean_quote(match[0])
        author = match[1].strip()
        if not quote or not author:
            continue
        logger.debug("quote extracted", extra={"extra_fields": {"strategy": name}})
        return QuoteCandidate(quote=quote, author=author)
    return QuoteCandidate(quote=text, author=UNKNOWN_AUTHOR)


def _candidate_from_mapping(payload: object) -> QuoteCandidate | None:
    if not isinstance(payload, dict):
        return None
    quote = payload.get("quote")
    author = payload.get("author")
    if not isinstance(quote, str) or not isinstance(author, str):
        return None
    if not quote.strip() or not author.strip():
        return None
    return QuoteCandidate(quote=_clean_quote(quote), author=author.strip())


def parse_generated_quote(raw: str | None) -> QuoteCandidate:
    """Read a ``{"quote", "author"}`` JSON reply, else run the heuristics."""

    text = (raw or "").strip()
    try:
        candidate = _candidate_from_mapping(json.loads(text))
    except ValueError:
        candidate = None
    if candidate:
        return candidate

    json_match = _JSON_OBJECT_RE.search(text)
    if json_match:
        try:
            candidate = _candidate_from_mapping(json.loads(json_match.group(0)))
        except ValueError:
            logger.debug("embedded json not parseable")
        if candidate:
            return candidate

    quote_match = _JSON_QUOTE_RE.search(text)
    author_match = _JSON_AUTHOR_RE.search(text)
    if quote_match and author_match and quote_match.group(1).strip():
        return QuoteCandidate(
            quote=quote_match.group(1).strip(),
            author=author_match.group(1).strip() or UNKNOWN_AUTHOR,
        )

    return extract_quote(text)
