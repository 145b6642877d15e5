from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from moodlog.app.ai import TextGenerationClient, TextServiceUnavailable


class _FakeCompletions:
    def __init__(self, content: str | None, delay: float = 0.0) -> None:
        self._content = content
        self._delay = delay
        self.kwargs: dict | None = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self._delay:
            await asyncio.sleep(self._delay)
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=self._content))]
        )


class _FakeClient:
    def __init__(self, completions: _FakeCompletions) -> None:
        self.chat = SimpleNamespace(completions=completions)


def _client_with(completions: _FakeCompletions, timeout: float = 10.0) -> TextGenerationClient:
    client = TextGenerationClient(
        api_key="fake",
        model="gpt-4o-mini",
        max_tokens=80,
        timeout=timeout,
    )
    client._client = _FakeClient(completions)  # type: ignore[assignment]
    return client


@pytest.mark.anyio
async def test_missing_key_is_unavailable() -> None:
    client = TextGenerationClient(api_key=None, model="gpt-4o-mini")
    assert client.available is False
    with pytest.raises(TextServiceUnavailable):
        await client.complete("Share a quote")


@pytest.mark.anyio
async def test_complete_returns_stripped_text() -> None:
    completions = _FakeCompletions("  Be kind to yourself. - Unknown \n")
    client = _client_with(completions)

    assert client.available is True
    assert await client.complete("Share a quote") == "Be kind to yourself. - Unknown"
    assert completions.kwargs is not None
    assert completions.kwargs["model"] == "gpt-4o-mini"
    assert completions.kwargs["max_tokens"] == 80
    assert completions.kwargs["messages"][-1] == {"role": "user", "content": "Share a quote"}


@pytest.mark.anyio
async def test_empty_completion_raises() -> None:
    client = _client_with(_FakeCompletions("   "))
    with pytest.raises(TextServiceUnavailable):
        await client.complete("Share a quote")


@pytest.mark.anyio
async def test_slow_completion_times_out() -> None:
    client = _client_with(_FakeCompletions("late", delay=1.0), timeout=0.01)
    with pytest.raises(asyncio.TimeoutError):
        await client.complete("Share a quote")
