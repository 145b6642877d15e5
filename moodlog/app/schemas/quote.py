from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class QuoteResponse(BaseModel):
    quote: str
    author: str
    source: Literal["remote", "fallback"]
