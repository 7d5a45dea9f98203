"""Bundle + cache + server-delta orchestration for the course catalogue."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from pathlib import Path
from typing import List, Literal, Mapping, Optional, Protocol

from roundcaddy.config import get_settings
from roundcaddy.metrics.course_sync import observe_sync, set_catalogue_size
from roundcaddy.providers.errors import ProviderError
from roundcaddy.providers.supabase import get_supabase_client

from .bundle import bundle_export_date, load_bundle_metadata, load_bundled_courses
from .cache import CourseCache
from .merge import merge_courses
from .models import Course, HoleData

logger = logging.getLogger(__name__)

SyncStatus = Literal["synced", "up_to_date", "skipped", "busy", "failed"]


class CourseNotFound(Exception):
    pass


class CourseDeltaSource(Protocol):
    def fetch_updated_courses(
        self,
        since: datetime,
        auth_headers: Mapping[str, str] | None = None,
        limit: int = 1000,
    ) -> List[Course]: ...


@dataclass
class SyncResult:
    status: SyncStatus
    updated_count: int = 0
    total_courses: int = 0
    since: Optional[datetime] = None
    synced_at: Optional[datetime] = None
    error: Optional[str] = None


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CourseSyncService:
    def __init__(
        self,
        client: CourseDeltaSource,
        cache: CourseCache,
        bundle_path: Path,
        *,
        interval_hours: float = 24.0,
        limit: int = 1000,
    ) -> None:
        self._client = client
        self._cache = cache
        self._bundle_path = Path(bundle_path)
        self._interval = timedelta(hours=interval_hours)
        self._limit = limit
        self._busy = threading.Lock()
        self._state_lock = threading.Lock()
        self._courses: Optional[List[Course]] = None

    @property
    def is_syncing(self) -> bool:
        return self._busy.locked()

    @property
    def cache(self) -> CourseCache:
        return self._cache

    # Loading
    def load_courses(self) -> List[Course]:
        """Return bundled courses overlaid with whatever the cache holds."""

        bundled = load_bundled_courses(self._bundle_path)
        cached = self._cache.load() or []
        if not bundled:
            if cached:
                logger.warning(
                    "bundle empty, falling back to cached courses",
                    extra={"cached": len(cached)},
                )
            courses = cached
        else:
            courses = merge_courses(bundled, cached) if cached else bundled

        with self._state_lock:
            self._courses = courses
        set_catalogue_size(len(courses))
        return courses

    def courses(self) -> List[Course]:
        with self._state_lock:
            current = self._courses
        if current is None:
            return self.load_courses()
        return current

    def get_course(self, course_id: str) -> Course:
        for course in self.courses():
            if course.id == course_id:
                return course
        raise CourseNotFound(course_id)

    # Sync bookkeeping
    def last_synced_at(self) -> Optional[datetime]:
        return self._cache.last_synced_at()

    def should_sync(self, now: Optional[datetime] = None) -> bool:
        last = self._cache.last_synced_at()
        if last is None:
            return True
        return (now or _now()) - last >= self._interval

    def sync_since(self) -> datetime:
        # Earliest of bundle export and last sync, so geometry added after the
        # bundle was built is never skipped.
        bundle_date = bundle_export_date(load_bundle_metadata(self._bundle_path))
        last = self._cache.last_synced_at()
        if last is None:
            return bundle_date
        return min(bundle_date, last)

    def sync(
        self, auth_headers: Mapping[str, str] | None = None, *, force: bool = False
    ) -> SyncResult:
        if not self._busy.acquire(blocking=False):
            logger.info("course sync already in progress, skipping")
            observe_sync("busy")
            return SyncResult(status="busy")
        try:
            return self._sync_locked(auth_headers, force=force)
        finally:
            self._busy.release()

    def _sync_locked(
        self, auth_headers: Mapping[str, str] | None, *, force: bool
    ) -> SyncResult:
        if not force and not self.should_sync():
            current = self.courses()
            observe_sync("skipped")
            return SyncResult(status="skipped", total_courses=len(current))

        since = self.sync_since()
        try:
            updates = self._client.fetch_updated_courses(
                since, auth_headers=auth_headers, limit=self._limit
            )
        except ProviderError as exc:
            logger.warning(
                "course sync failed, keeping cached catalogue",
                extra={"since": since.isoformat(), "error": str(exc)},
            )
            observe_sync("failed")
            return SyncResult(status="failed", since=since, error=str(exc))

        current = self.courses()
        synced_at = _now()
        if updates:
            merged = merge_courses(current, updates)
            self._cache.save(merged)
            with self._state_lock:
                self._courses = merged
            status: SyncStatus = "synced"
            total = len(merged)
            logger.info(
                "course sync merged updates",
                extra={"updated": len(updates), "total": total},
            )
        else:
            status = "up_to_date"
            total = len(current)
        self._cache.set_last_synced_at(synced_at)
        observe_sync(status, updated=len(updates), total=total)
        return SyncResult(
            status=status,
            updated_count=len(updates),
            total_courses=total,
            since=since,
            synced_at=synced_at,
        )

    def update_course_holes(self, course_id: str, hole_data: List[HoleData]) -> Course:
        """Attach freshly fetched hole geometry to one course and persist it."""

        with self._state_lock:
            current = list(self._courses if self._courses is not None else [])
        if not current:
            current = list(self.load_courses())
        for position, course in enumerate(current):
            if course.id != course_id:
                continue
            payload = course.model_dump()
            payload["hole_data"] = [hole.model_dump() for hole in hole_data]
            updated = Course.model_validate(payload)
            current[position] = updated
            self._cache.save(current)
            with self._state_lock:
                self._courses = current
            return updated
        raise CourseNotFound(course_id)


@lru_cache(maxsize=1)
def get_course_sync_service() -> CourseSyncService:
    settings = get_settings()
    return CourseSyncService(
        get_supabase_client(),
        CourseCache(Path(settings.data_dir)),
        Path(settings.course_bundle_path),
        interval_hours=settings.course_sync_interval_hours,
        limit=settings.course_sync_limit,
    )


__all__ = [
    "CourseDeltaSource",
    "CourseNotFound",
    "CourseSyncService",
    "SyncResult",
    "get_course_sync_service",
]
