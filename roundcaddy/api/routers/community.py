from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from roundcaddy.courses.community import ContributorStats, CourseDiscussion
from roundcaddy.providers import ProviderError, SupabaseClient, get_supabase_client
from roundcaddy.security import backend_auth_headers, require_api_key

router = APIRouter(
    prefix="/api/community", tags=["community"], dependencies=[Depends(require_api_key)]
)


@router.get("/leaderboard", response_model=List[ContributorStats])
def contributor_leaderboard(
    limit: int = Query(default=50, ge=1, le=200),
    auth_headers: Optional[Dict[str, str]] = Depends(backend_auth_headers),
    client: SupabaseClient = Depends(get_supabase_client),
) -> List[ContributorStats]:
    try:
        return client.fetch_contributor_leaderboard(auth_headers, limit=limit)
    except ProviderError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@router.get("/courses/{course_id}/discussions", response_model=List[CourseDiscussion])
def course_discussions(
    course_id: str,
    limit: int = Query(default=50, ge=1, le=200),
    client: SupabaseClient = Depends(get_supabase_client),
) -> List[CourseDiscussion]:
    try:
        return client.fetch_course_discussions(course_id, limit=limit)
    except ProviderError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


__all__ = ["router"]
