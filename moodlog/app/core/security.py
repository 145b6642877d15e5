from __future__ import annotations

import hashlib

from fastapi import Header, HTTPException, Request, status

OWNER_HEADER = "X-Moodlog-Owner"


def hash_identifier(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:12]


async def resolve_owner(
    request: Request,
    owner_header: str | None = Header(default=None, alias=OWNER_HEADER),
) -> str:
    """Read the opaque owner id; identity is established upstream."""

    owner_id = (owner_header or "").strip()
    if not owner_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="owner header missing",
        )
    if len(owner_id) > 64:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="owner id too long",
        )
    request.state.telemetry_owner = hash_identifier(owner_id)
    return owner_id
