"""Course catalogue endpoints backed by the bundle, the local cache and sync."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from roundcaddy.config import NEARBY_DEFAULT_RADIUS_MILES
from roundcaddy.courses.filters import filter_courses, nearby_courses
from roundcaddy.courses.geometry import (
    distance_to_green_yards,
    nearest_hole,
    playable_holes,
)
from roundcaddy.courses.models import Course, HoleData
from roundcaddy.courses.sync import (
    CourseNotFound,
    CourseSyncService,
    get_course_sync_service,
)
from roundcaddy.providers import ProviderError, SupabaseClient, get_supabase_client
from roundcaddy.security import backend_auth_headers, require_api_key

router = APIRouter(
    prefix="/api/courses", tags=["courses"], dependencies=[Depends(require_api_key)]
)

logger = logging.getLogger(__name__)


class CourseSummary(BaseModel):
    id: str
    name: str
    location: str
    country: Optional[str] = None
    par: Optional[int] = None
    holes: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    avg_rating: Optional[float] = None
    review_count: Optional[int] = None
    has_hole_data: bool = False
    distance_miles: Optional[float] = None

    @classmethod
    def from_course(
        cls, course: Course, distance_miles: float | None = None
    ) -> "CourseSummary":
        return cls(
            id=course.id,
            name=course.name,
            location=course.location,
            country=course.country,
            par=course.par,
            holes=course.holes,
            latitude=course.latitude,
            longitude=course.longitude,
            avg_rating=course.avg_rating,
            review_count=course.review_count,
            has_hole_data=course.has_hole_data,
            distance_miles=(
                round(distance_miles, 1) if distance_miles is not None else None
            ),
        )


class CourseHolesOut(BaseModel):
    course_id: str
    source: str
    holes: List[HoleData]
    playable_holes: int


class NearestHoleOut(BaseModel):
    course_id: str
    hole_number: int
    par: int
    distance_to_green_yards: Optional[int] = None


class SyncOut(BaseModel):
    status: str
    updated_count: int = 0
    total_courses: int = 0
    since: Optional[datetime] = None
    synced_at: Optional[datetime] = None
    error: Optional[str] = None


class SyncStatusOut(BaseModel):
    syncing: bool
    last_synced_at: Optional[datetime] = None
    due: bool
    total_courses: int


@router.get("", response_model=List[CourseSummary])
def list_courses(
    country: str | None = Query(default=None),
    search: str | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=1000),
    service: CourseSyncService = Depends(get_course_sync_service),
) -> List[CourseSummary]:
    courses = filter_courses(service.courses(), country=country, search=search)
    return [CourseSummary.from_course(course) for course in courses[:limit]]


@router.get("/nearby", response_model=List[CourseSummary])
def list_nearby_courses(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    radius: float = Query(default=NEARBY_DEFAULT_RADIUS_MILES, gt=0),
    limit: int = Query(default=50, ge=1, le=500),
    service: CourseSyncService = Depends(get_course_sync_service),
) -> List[CourseSummary]:
    hits = nearby_courses(service.courses(), lat, lon, radius)
    return [
        CourseSummary.from_course(course, distance) for course, distance in hits[:limit]
    ]


@router.post("/sync", response_model=SyncOut)
def sync_courses(
    force: bool = Query(default=False),
    auth_headers: Optional[Dict[str, str]] = Depends(backend_auth_headers),
    service: CourseSyncService = Depends(get_course_sync_service),
) -> SyncOut:
    result = service.sync(auth_headers, force=force)
    return SyncOut(
        status=result.status,
        updated_count=result.updated_count,
        total_courses=result.total_courses,
        since=result.since,
        synced_at=result.synced_at,
        error=result.error,
    )


@router.get("/sync/status", response_model=SyncStatusOut)
def sync_status(
    service: CourseSyncService = Depends(get_course_sync_service),
) -> SyncStatusOut:
    return SyncStatusOut(
        syncing=service.is_syncing,
        last_synced_at=service.last_synced_at(),
        due=service.should_sync(),
        total_courses=len(service.courses()),
    )


@router.get("/{course_id}", response_model=Course, response_model_exclude_none=True)
def get_course(
    course_id: str,
    service: CourseSyncService = Depends(get_course_sync_service),
) -> Course:
    try:
        return service.get_course(course_id)
    except CourseNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="course not found"
        )


@router.get(
    "/{course_id}/holes",
    response_model=CourseHolesOut,
    response_model_exclude_none=True,
)
def get_course_holes(
    course_id: str,
    service: CourseSyncService = Depends(get_course_sync_service),
    client: SupabaseClient = Depends(get_supabase_client),
) -> CourseHolesOut:
    try:
        course = service.get_course(course_id)
    except CourseNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="course not found"
        )

    source = "local"
    holes = course.hole_data or []
    if not holes:
        try:
            holes = client.fetch_course_holes(course_id)
        except ProviderError as exc:
            logger.warning(
                "hole data fetch failed",
                extra={"course_id": course_id, "error": str(exc)},
            )
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            )
        source = "remote"
        if holes:
            try:
                course = service.update_course_holes(course_id, holes)
            except ValueError as exc:
                raise HTTPException(
                    status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
                )
            holes = course.hole_data or []

    return CourseHolesOut(
        course_id=course_id,
        source=source,
        holes=holes,
        playable_holes=len(playable_holes(holes)),
    )


@router.get("/{course_id}/holes/nearest", response_model=NearestHoleOut)
def get_nearest_hole(
    course_id: str,
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    service: CourseSyncService = Depends(get_course_sync_service),
) -> NearestHoleOut:
    try:
        course = service.get_course(course_id)
    except CourseNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="course not found"
        )
    hole = nearest_hole(course.hole_data, lat, lon)
    if hole is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="no hole geometry"
        )
    return NearestHoleOut(
        course_id=course_id,
        hole_number=hole.hole_number,
        par=hole.par,
        distance_to_green_yards=distance_to_green_yards(hole, lat, lon),
    )


__all__ = ["router"]
