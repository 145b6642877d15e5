from __future__ import annotations

import asyncio
import logging
import random
from collections import OrderedDict
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from ..metrics import QUOTES_SERVED, TEXT_SERVICE_FAILURES
from .extractor import QuoteCandidate, parse_generated_quote
from .fallback import FALLBACK_QUOTES, QUOTE_PROMPT

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_THRESHOLD = 3


class TextClient(Protocol):
    @property
    def available(self) -> bool: ...

    async def complete(self, prompt: str) -> str: ...


@dataclass
class QuoteResult:
    quote: str
    author: str
    source: str


class RecentQuotes:
    """Insertion-ordered set of quote texts, oldest evicted past ``limit``."""

    def __init__(self, limit: int) -> None:
        self._limit = max(1, limit)
        self._items: OrderedDict[str, None] = OrderedDict()

    def __contains__(self, quote: object) -> bool:
        return quote in self._items

    def __len__(self) -> int:
        return len(self._items)

    @property
    def limit(self) -> int:
        return self._limit

    def remember(self, quote: str) -> None:
        self._items.pop(quote, None)
        self._items[quote] = None
        while len(self._items) > self._limit:
            self._items.popitem(last=False)


class QuoteService:
    """Fetch affirmation quotes with dedupe, fallback pool and failure backoff.

    One instance owns the recency set, the currently displayed quote and the
    consecutive-failure counter. After more than ``failure_threshold``
    consecutive failures the remote call is skipped for one request and the
    counter is decremented, so the service is retried again shortly after.
    """

    def __init__(
        self,
        client: TextClient,
        *,
        pool: Sequence[QuoteCandidate] = FALLBACK_QUOTES,
        failure_threshold: int = DEFAULT_FAILURE_THRESHOLD,
        prompt: str = QUOTE_PROMPT,
        rng: random.Random | None = None,
    ) -> None:
        if not pool:
            raise ValueError("fallback pool must not be empty")
        self._client = client
        self._pool = tuple(pool)
        self._failure_threshold = failure_threshold
        self._prompt = prompt
        self._rng = rng or random.Random()
        self._recent = RecentQuotes(len(self._pool) // 2)
        self._current: QuoteCandidate | None = None
        self._failures = 0
        self._lock = asyncio.Lock()

    @property
    def failures(self) -> int:
        return self._failures

    @property
    def current(self) -> QuoteCandidate | None:
        return self._current

    @property
    def recent(self) -> RecentQuotes:
        return self._recent

    async def next_quote(self) -> QuoteResult:
        async with self._lock:
            candidate = await self._fetch_remote()
            source = "remote"
            if candidate is None:
                candidate = self._pick_fallback()
                source = "fallback"
            self._recent.remember(candidate.quote)
            self._current = candidate
            QUOTES_SERVED.labels(source).inc()
            return QuoteResult(quote=candidate.quote, author=candidate.author, source=source)

    async def _fetch_remote(self) -> QuoteCandidate | None:
        if self._failures > self._failure_threshold:
            self._failures -= 1
            TEXT_SERVICE_FAILURES.labels("backoff").inc()
            logger.info(
                "text service skipped after repeated failures",
                extra={"extra_fields": {"failures": self._failures}},
            )
            return None
        if not self._client.available:
            return None

        try:
            raw = await self._client.complete(self._prompt)
        except Exception as exc:
            self._failures += 1
            TEXT_SERVICE_FAILURES.labels(type(exc).__name__).inc()
            logger.warning(
                "text service call failed, using fallback quote",
                extra={"extra_fields": {"failures": self._failures}},
                exc_info=True,
            )
            return None

        self._failures = 0
        candidate = parse_generated_quote(raw)
        if not self._is_fresh(candidate):
            logger.info("generated quote rejected as repeat or empty")
            return None
        return candidate

    def _is_fresh(self, candidate: QuoteCandidate) -> bool:
        if not candidate.quote:
            return False
        if candidate.quote in self._recent:
            return False
        return not (self._current and candidate.quote == self._current.quote)

    def _pick_fallback(self) -> QuoteCandidate:
        current_text = self._current.quote if self._current else None
        choices = [
            quote
            for quote in self._pool
            if quote.quote not in self._recent and quote.quote != current_text
        ]
        if not choices:
            choices = [quote for quote in self._pool if quote.quote != current_text]
        if not choices:
            choices = list(self._pool)
        return self._rng.choice(choices)
