from __future__ import annotations

from prometheus_client import Counter, Gauge

from . import REGISTRY

COURSE_SYNC_TOTAL = Counter(
    "course_sync_total",
    "Course catalogue sync attempts by outcome",
    ["status"],
    registry=REGISTRY,
)

COURSE_SYNC_UPDATES_TOTAL = Counter(
    "course_sync_updates_total",
    "Courses received from the backend as sync deltas",
    registry=REGISTRY,
)

COURSES_CACHED = Gauge(
    "courses_cached",
    "Courses held in the local merged catalogue",
    registry=REGISTRY,
)


def set_catalogue_size(total: int) -> None:
    COURSES_CACHED.set(total)


def observe_sync(status: str, updated: int = 0, total: int | None = None) -> None:
    COURSE_SYNC_TOTAL.labels(status=status).inc()
    if updated:
        COURSE_SYNC_UPDATES_TOTAL.inc(updated)
    if total is not None:
        set_catalogue_size(total)


__all__ = [
    "COURSE_SYNC_TOTAL",
    "COURSE_SYNC_UPDATES_TOTAL",
    "COURSES_CACHED",
    "observe_sync",
    "set_catalogue_size",
]
