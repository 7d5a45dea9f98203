from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from roundcaddy.storage import KeyValueStore, atomic_write_text

from .bundle import parse_timestamp
from .models import Course

logger = logging.getLogger(__name__)

COURSES_CACHE_FILENAME = "courses_cache.json"
PREFERENCES_FILENAME = "preferences.json"
LAST_SYNC_KEY = "courses_last_sync_date"
LEGACY_COURSES_CACHE_KEY = "courses_cache"

_COURSE_LIST = TypeAdapter(List[Course])


class CourseCache:
    """On-disk copy of the merged course list plus sync bookkeeping."""

    def __init__(self, base_dir: Path, kv: KeyValueStore | None = None) -> None:
        self._base_dir = Path(base_dir)
        self._path = self._base_dir / COURSES_CACHE_FILENAME
        self._kv = kv or KeyValueStore(self._base_dir / PREFERENCES_FILENAME)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def kv(self) -> KeyValueStore:
        return self._kv

    def load(self) -> Optional[List[Course]]:
        if not self._path.exists():
            return None
        try:
            courses = _COURSE_LIST.validate_json(self._path.read_bytes())
        except (ValidationError, OSError):
            logger.warning(
                "failed to decode cached courses", extra={"path": str(self._path)}
            )
            return None
        logger.debug("loaded cached courses", extra={"count": len(courses)})
        return courses

    def save(self, courses: List[Course]) -> None:
        encoded = _COURSE_LIST.dump_json(courses, exclude_none=True).decode("utf-8")
        atomic_write_text(self._path, encoded)
        logger.info(
            "cached courses", extra={"count": len(courses), "bytes": len(encoded)}
        )

    def clear(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            pass
        self._kv.delete(LEGACY_COURSES_CACHE_KEY)
        logger.info("cleared course cache", extra={"path": str(self._path)})

    def last_synced_at(self) -> Optional[datetime]:
        raw = self._kv.get(LAST_SYNC_KEY)
        if not isinstance(raw, str):
            return None
        return parse_timestamp(raw)

    def set_last_synced_at(self, when: datetime) -> None:
        self._kv.set(LAST_SYNC_KEY, when.isoformat())


__all__ = [
    "COURSES_CACHE_FILENAME",
    "CourseCache",
    "LAST_SYNC_KEY",
]
