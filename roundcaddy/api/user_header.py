from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Header

ANONYMOUS_USER = "anonymous"

# Rounds are owned by x-user-id; keyless local clients share one bucket.
UserIdHeader = Annotated[Optional[str], Header(alias="x-user-id")]


def derive_user_id(api_key: str | None, user_id: str | None) -> str:
    for candidate in (user_id, api_key):
        if candidate and candidate.strip():
            return candidate.strip()
    return ANONYMOUS_USER
