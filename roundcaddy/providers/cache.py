"""Time-limited provider responses with content ETags.

Entries live in a :class:`~roundcaddy.storage.KeyValueStore` file per
provider, so a restart keeps serving weather that has not yet expired.
"""

from __future__ import annotations

import hashlib
import json
import os
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

from roundcaddy.config import get_settings
from roundcaddy.storage import KeyValueStore


def provider_cache_dir() -> Path:
    override = os.getenv("ROUNDCADDY_PROVIDER_CACHE_DIR")
    if override:
        return Path(override)
    return Path(get_settings().data_dir) / "providers"


def hash_value(value: Any) -> str:
    serialized = json.dumps(value, sort_keys=True, separators=(",", ":")).encode()
    return hashlib.sha256(serialized).hexdigest()


@dataclass
class CacheEntry:
    value: Any
    etag: str
    expires_at: float

    @property
    def ttl_seconds(self) -> int:
        return max(0, int(self.expires_at - time.time()))

    def is_expired(self) -> bool:
        return time.time() >= self.expires_at


def _entry_from_raw(raw: Any) -> Optional[CacheEntry]:
    if not isinstance(raw, dict) or raw.get("etag") is None:
        return None
    try:
        expires_at = float(raw.get("expires_at", 0))
    except (TypeError, ValueError):
        return None
    return CacheEntry(value=raw.get("value"), etag=raw["etag"], expires_at=expires_at)


class ProviderCache:
    def __init__(self, name: str, default_ttl: int) -> None:
        self.name = name
        self._default_ttl = default_ttl
        self._store = KeyValueStore(provider_cache_dir() / f"{name}.json")
        self._evict_expired()

    def _evict_expired(self) -> None:
        for key in self._store.keys():
            entry = _entry_from_raw(self._store.get(key))
            if entry is None or entry.is_expired():
                self._store.delete(key)

    def get(self, key: str) -> Optional[CacheEntry]:
        entry = _entry_from_raw(self._store.get(key))
        if entry is None:
            return None
        if entry.is_expired():
            self._store.delete(key)
            return None
        return entry

    def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[int] = None,
        etag: Optional[str] = None,
    ) -> CacheEntry:
        entry = CacheEntry(
            value=value,
            etag=etag or hash_value(value),
            expires_at=time.time() + (ttl or self._default_ttl),
        )
        self._store.set(key, asdict(entry))
        return entry


__all__ = ["CacheEntry", "ProviderCache", "hash_value", "provider_cache_dir"]
