"""Last-write-wins reconciliation of the local course list with server deltas."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from .models import Course

logger = logging.getLogger(__name__)


def _carried_fields(delta: Course) -> Dict[str, Any]:
    """Return the fields the delta payload actually carries.

    A field counts when it was present in the payload and is not null. Hole
    geometry only counts when it is non-empty, so a slim delta never wipes
    geometry already known locally.
    """

    carried: Dict[str, Any] = {}
    for name in delta.model_fields_set:
        value = getattr(delta, name)
        if value is None:
            continue
        if name == "hole_data" and not value:
            continue
        carried[name] = value
    return carried


def overlay_course(base: Course, delta: Course) -> Course:
    if base.id != delta.id:
        raise ValueError(f"cannot overlay course {delta.id} onto {base.id}")
    return base.model_copy(update=_carried_fields(delta))


def merge_courses(base: Iterable[Course], updates: Iterable[Course]) -> List[Course]:
    merged: List[Course] = []
    index: Dict[str, int] = {}
    for course in base:
        if course.id in index:
            merged[index[course.id]] = course
            continue
        index[course.id] = len(merged)
        merged.append(course)

    base_count = len(merged)
    update_count = 0
    with_holes = 0
    for delta in updates:
        update_count += 1
        if delta.hole_data:
            with_holes += 1
        position = index.get(delta.id)
        if position is None:
            index[delta.id] = len(merged)
            merged.append(delta)
        else:
            merged[position] = overlay_course(merged[position], delta)

    logger.debug(
        "merged course lists",
        extra={
            "base": base_count,
            "updated": update_count,
            "with_hole_data": with_holes,
            "total": len(merged),
        },
    )
    return merged


__all__ = ["merge_courses", "overlay_course"]
