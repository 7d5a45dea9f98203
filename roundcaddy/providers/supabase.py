"""PostgREST client for the hosted RoundCaddy backend."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from roundcaddy.config import get_settings
from roundcaddy.courses.community import ContributorStats, CourseDiscussion
from roundcaddy.courses.models import Course, HoleData
from roundcaddy.notes.models import CourseNote
from roundcaddy.rounds.models import Round

from .errors import ProviderError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
ClientFactory = Callable[..., httpx.Client]


def _http_client_factory(**kwargs: Any) -> httpx.Client:
    timeout = kwargs.pop("timeout", 10.0)
    return httpx.Client(timeout=timeout, **kwargs)


def _format_since(since: datetime) -> str:
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    return since.astimezone(timezone.utc).isoformat()


class SupabaseClient:
    def __init__(
        self,
        base_url: str,
        anon_key: str,
        *,
        client_factory: ClientFactory | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._rest_url = base_url.rstrip("/") + "/rest/v1"
        self._anon_key = anon_key
        self._client_factory = client_factory or _http_client_factory
        self._timeout = timeout

    def _headers(self, auth_headers: Mapping[str, str] | None) -> Dict[str, str]:
        headers = {"apikey": self._anon_key, "Accept": "application/json"}
        if auth_headers:
            headers.update(auth_headers)
        return headers

    def _get(
        self,
        table: str,
        params: Mapping[str, Any],
        auth_headers: Mapping[str, str] | None = None,
    ) -> Any:
        url = f"{self._rest_url}/{table}"
        try:
            with self._client_factory(timeout=self._timeout) as client:
                response = client.get(
                    url, params=dict(params), headers=self._headers(auth_headers)
                )
        except httpx.RequestError as exc:
            raise ProviderError(f"{table} request failed: {exc}") from exc
        if response.status_code != 200:
            raise ProviderError(
                f"{table} request failed: {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError(f"{table} returned invalid JSON") from exc

    def _get_list(
        self,
        table: str,
        model: Type[ModelT],
        params: Mapping[str, Any],
        auth_headers: Mapping[str, str] | None = None,
    ) -> List[ModelT]:
        payload = self._get(table, params, auth_headers)
        try:
            return TypeAdapter(List[model]).validate_python(payload)  # type: ignore[valid-type]
        except ValidationError as exc:
            logger.warning(
                "failed to decode backend rows",
                extra={"table": table, "errors": exc.error_count()},
            )
            raise ProviderError(f"{table} payload failed validation") from exc

    # Courses
    def fetch_updated_courses(
        self,
        since: datetime,
        auth_headers: Mapping[str, str] | None = None,
        limit: int = 1000,
    ) -> List[Course]:
        params = {
            "select": "*",
            "updated_at": f"gt.{_format_since(since)}",
            "order": "updated_at.desc",
            "limit": str(limit),
        }
        return self._get_list("courses", Course, params, auth_headers)

    def fetch_courses(self, search: str | None = None, limit: int = 50) -> List[Course]:
        params: Dict[str, str] = {"order": "review_count.desc", "limit": str(limit)}
        if search:
            params["name"] = f"ilike.*{search}*"
        return self._get_list("courses", Course, params)

    def fetch_course(self, course_id: str) -> Optional[Course]:
        courses = self._get_list("courses", Course, {"id": f"eq.{course_id}"})
        return courses[0] if courses else None

    def fetch_course_holes(self, course_id: str) -> List[HoleData]:
        rows = self._get(
            "courses", {"id": f"eq.{course_id}", "select": "id,hole_data"}
        )
        if not isinstance(rows, list):
            raise ProviderError("courses hole_data payload is not a row list")
        if not rows:
            return []
        if not isinstance(rows[0], dict):
            raise ProviderError("courses hole_data row is not an object")
        raw_holes = rows[0].get("hole_data") or []
        try:
            return TypeAdapter(List[HoleData]).validate_python(raw_holes)
        except ValidationError as exc:
            raise ProviderError("hole_data payload failed validation") from exc

    def fetch_course_discussions(
        self, course_id: str, limit: int = 50
    ) -> List[CourseDiscussion]:
        params = {
            "course_id": f"eq.{course_id}",
            "order": "created_at.desc",
            "limit": str(limit),
        }
        return self._get_list("course_discussions", CourseDiscussion, params)

    def fetch_community_notes(self, course_id: str) -> List[CourseNote]:
        params = {"course_id": f"eq.{course_id}", "order": "votes.desc"}
        notes = self._get_list("course_notes", CourseNote, params)
        return [note.model_copy(update={"is_personal": False}) for note in notes]

    def fetch_contributor_leaderboard(
        self, auth_headers: Mapping[str, str] | None = None, limit: int = 50
    ) -> List[ContributorStats]:
        params = {"order": "reputation_score.desc", "limit": str(limit)}
        return self._get_list(
            "contributor_reputation", ContributorStats, params, auth_headers
        )

    # Rounds
    def fetch_rounds(
        self,
        user_id: str,
        auth_headers: Mapping[str, str] | None = None,
        limit: int = 20,
    ) -> List[Round]:
        params = {
            "user_id": f"eq.{user_id}",
            "order": "played_at.desc",
            "limit": str(limit),
        }
        return self._get_list("rounds", Round, params, auth_headers)

    def fetch_round(
        self, round_id: str, auth_headers: Mapping[str, str] | None = None
    ) -> Optional[Round]:
        rounds = self._get_list("rounds", Round, {"id": f"eq.{round_id}"}, auth_headers)
        return rounds[0] if rounds else None


@lru_cache(maxsize=1)
def get_supabase_client() -> SupabaseClient:
    settings = get_settings()
    return SupabaseClient(
        settings.supabase_url,
        settings.supabase_anon_key,
        timeout=settings.http_timeout_s,
    )


__all__ = ["SupabaseClient", "get_supabase_client"]
