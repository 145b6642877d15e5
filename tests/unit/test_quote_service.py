from __future__ import annotations

import random

import pytest

from moodlog.app.quotes import FALLBACK_QUOTES, QuoteCandidate, QuoteService, RecentQuotes


class FakeTextClient:
    def __init__(self, *replies: str | Exception, available: bool = True) -> None:
        self._replies = list(replies)
        self.available = available
        self.calls = 0

    async def complete(self, prompt: str) -> str:
        self.calls += 1
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


def _service(client: FakeTextClient, **kwargs) -> QuoteService:
    return QuoteService(client, rng=random.Random(0), **kwargs)


def test_recent_quotes_evicts_oldest() -> None:
    recent = RecentQuotes(2)
    for quote in ("a", "b", "c"):
        recent.remember(quote)
    assert "a" not in recent
    assert "b" in recent and "c" in recent
    assert len(recent) == 2

    recent.remember("b")
    recent.remember("d")
    assert "c" not in recent
    assert "b" in recent and "d" in recent


def test_recent_limit_is_half_the_pool() -> None:
    service = _service(FakeTextClient("", available=False))
    assert service.recent.limit == len(FALLBACK_QUOTES) // 2


def test_empty_pool_is_rejected() -> None:
    with pytest.raises(ValueError):
        QuoteService(FakeTextClient("", available=False), pool=())


@pytest.mark.anyio
async def test_unavailable_client_serves_fallback() -> None:
    client = FakeTextClient("unused", available=False)
    service = _service(client)

    result = await service.next_quote()

    assert result.source == "fallback"
    assert QuoteCandidate(result.quote, result.author) in FALLBACK_QUOTES
    assert client.calls == 0
    assert service.failures == 0
    assert service.current == QuoteCandidate(result.quote, result.author)


@pytest.mark.anyio
async def test_remote_quote_is_parsed_and_remembered() -> None:
    client = FakeTextClient('{"quote": "Rest is part of the work.", "author": "Unknown"}')
    service = _service(client)

    result = await service.next_quote()

    assert result.source == "remote"
    assert result.quote == "Rest is part of the work."
    assert result.author == "Unknown"
    assert "Rest is part of the work." in service.recent


@pytest.mark.anyio
async def test_repeated_remote_quote_is_replaced_by_fallback() -> None:
    client = FakeTextClient("Be here now. **Ram Dass**")
    service = _service(client)

    first = await service.next_quote()
    second = await service.next_quote()

    assert first.source == "remote"
    assert second.source == "fallback"
    assert second.quote != first.quote
    assert service.failures == 0


@pytest.mark.anyio
async def test_fallback_never_repeats_recent_quotes() -> None:
    service = _service(FakeTextClient("", available=False))
    served = [(await service.next_quote()).quote for _ in range(24)]

    limit = service.recent.limit
    for index, quote in enumerate(served):
        assert quote not in served[max(0, index - limit) : index]


@pytest.mark.anyio
async def test_single_quote_pool_still_serves() -> None:
    only = QuoteCandidate("Keep going.", "Unknown")
    service = _service(FakeTextClient("", available=False), pool=(only,))

    assert (await service.next_quote()).quote == "Keep going."
    assert (await service.next_quote()).quote == "Keep going."


@pytest.mark.anyio
async def test_failures_trigger_backoff() -> None:
    client = FakeTextClient(RuntimeError("service down"))
    service = _service(client)

    for expected in range(1, 5):
        result = await service.next_quote()
        assert result.source == "fallback"
        assert service.failures == expected
    assert client.calls == 4

    # Counter above threshold: this request skips the client
    await service.next_quote()
    assert client.calls == 4
    assert service.failures == 3

    await service.next_quote()
    assert client.calls == 5
    assert service.failures == 4


@pytest.mark.anyio
async def test_success_resets_failures() -> None:
    client = FakeTextClient(
        TimeoutError(),
        TimeoutError(),
        '{"quote": "Feelings pass like weather.", "author": "Anon"}',
    )
    service = _service(client)

    await service.next_quote()
    await service.next_quote()
    assert service.failures == 2

    result = await service.next_quote()
    assert result.source == "remote"
    assert service.failures == 0


@pytest.mark.anyio
async def test_custom_threshold() -> None:
    client = FakeTextClient(RuntimeError("down"))
    service = _service(client, failure_threshold=0)

    await service.next_quote()
    assert service.failures == 1
    await service.next_quote()
    assert client.calls == 1
    assert service.failures == 0
