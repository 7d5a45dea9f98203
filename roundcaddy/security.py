"""Security helpers for API authentication."""

from __future__ import annotations

import os
from typing import Dict, Optional, Set

from fastapi import Header, HTTPException, Query, status


def _parse_keys(raw: str) -> Set[str]:
    return {key.strip() for key in raw.split(",") if key.strip()}


def load_api_keys() -> Set[str]:
    """Return the set of accepted API keys, read from env on every call."""

    allowed = _parse_keys(os.getenv("ROUNDCADDY_API_KEYS", ""))
    primary = os.getenv("API_KEY")
    if primary:
        allowed.add(primary)
    return allowed


def require_api_key(
    x_api_key: str | None = Header(default=None, alias="x-api-key"),
    api_key_query: str | None = Query(default=None, alias="apiKey"),
) -> str | None:
    """Require a matching API key header when enabled via env.

    Returns the resolved API key (from header or query) so routers can fall back
    to it as the caller identity.
    """

    candidate = x_api_key or api_key_query

    if os.getenv("REQUIRE_API_KEY", "0") != "1":
        return candidate

    allowed_keys = load_api_keys()
    if not allowed_keys or candidate not in allowed_keys:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid api key",
        )

    return candidate


def backend_auth_headers(
    authorization: str | None = Header(default=None, alias="authorization"),
) -> Optional[Dict[str, str]]:
    """Forward a caller's bearer token to the course backend."""

    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    return {"Authorization": authorization}


__all__ = ["backend_auth_headers", "load_api_keys", "require_api_key"]
