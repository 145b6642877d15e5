from __future__ import annotations

import asyncio

from openai import AsyncOpenAI

SYSTEM_PROMPT = "You are a concise, warm wellbeing companion."


class TextServiceUnavailable(RuntimeError):
    """Raised when the text service is unconfigured or returned nothing usable."""


class TextGenerationClient:
    """Thin wrapper above the OpenAI async SDK with a hard timeout."""

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str,
        max_tokens: int = 100,
        timeout: float = 10.0,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._client = AsyncOpenAI(api_key=api_key, max_retries=0) if api_key else None

    @property
    def available(self) -> bool:
        return self._client is not None

    async def complete(self, prompt: str) -> str:
        """Return the raw generated text.

        Raises ``TextServiceUnavailable`` when unconfigured or the reply is
        empty, ``TimeoutError`` when the call outlives the timeout, and lets
        SDK errors propagate.
        """

        if self._client is None:
            raise TextServiceUnavailable("text service not configured")

        completion = await asyncio.wait_for(
            self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=self._max_tokens,
                temperature=0.7,
            ),
            timeout=self._timeout,
        )
        if not completion.choices:
            raise TextServiceUnavailable("empty completion")
        message = completion.choices[0].message.content or ""
        if not message.strip():
            raise TextServiceUnavailable("empty completion")
        return message.strip()
