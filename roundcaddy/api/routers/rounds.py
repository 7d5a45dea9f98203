from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator

from roundcaddy.api.user_header import UserIdHeader, derive_user_id
from roundcaddy.config import ROUNDS_LIST_LIMIT
from roundcaddy.providers import ProviderError, SupabaseClient, get_supabase_client
from roundcaddy.rounds.models import HoleScore, Round, normalize_played_at
from roundcaddy.rounds.service import (
    RoundAlreadyExists,
    RoundNotFound,
    RoundOwnershipError,
    RoundService,
    get_round_service,
)
from roundcaddy.rounds.stats import UserStats, compute_user_stats
from roundcaddy.security import backend_auth_headers, require_api_key

router = APIRouter(
    prefix="/api/rounds", tags=["rounds"], dependencies=[Depends(require_api_key)]
)

logger = logging.getLogger(__name__)

STATS_ROUND_LIMIT = 1000


class SaveRoundRequest(BaseModel):
    id: Optional[str] = None
    course_id: Optional[str] = None
    course_name: str
    played_at: datetime
    total_score: int = Field(ge=1)
    total_putts: Optional[int] = None
    fairways_hit: Optional[int] = None
    fairways_total: Optional[int] = None
    gir: Optional[int] = None
    penalties: Optional[int] = None
    course_rating: Optional[float] = None
    slope_rating: Optional[int] = None
    sg_total: Optional[float] = None
    sg_off_tee: Optional[float] = None
    sg_approach: Optional[float] = None
    sg_around_green: Optional[float] = None
    sg_putting: Optional[float] = None
    scoring_format: Optional[str] = None
    holes: Optional[List[HoleScore]] = None

    @field_validator("played_at", mode="before")
    @classmethod
    def _parse_played_at(cls, value: object) -> object:
        return normalize_played_at(value)


@router.post("", response_model=Round, status_code=status.HTTP_201_CREATED)
def save_round(
    payload: SaveRoundRequest,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    service: RoundService = Depends(get_round_service),
) -> Round:
    owner = derive_user_id(api_key, user_id)
    try:
        round_ = Round.model_validate(
            {
                **payload.model_dump(),
                "id": payload.id or str(uuid.uuid4()),
                "user_id": owner,
            }
        )
        return service.save_round(round_)
    except RoundAlreadyExists:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="round already exists"
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("", response_model=List[Round])
def list_rounds(
    limit: int = Query(default=ROUNDS_LIST_LIMIT, ge=1, le=200),
    remote: bool = Query(default=False),
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    auth_headers: Optional[Dict[str, str]] = Depends(backend_auth_headers),
    service: RoundService = Depends(get_round_service),
    client: SupabaseClient = Depends(get_supabase_client),
) -> List[Round]:
    owner = derive_user_id(api_key, user_id)
    if remote:
        try:
            return client.fetch_rounds(owner, auth_headers=auth_headers, limit=limit)
        except ProviderError as exc:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            )
    try:
        return service.list_rounds(owner, limit=limit)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("/stats", response_model=UserStats)
def get_user_stats(
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    service: RoundService = Depends(get_round_service),
) -> UserStats:
    owner = derive_user_id(api_key, user_id)
    try:
        rounds = service.list_rounds(owner, limit=STATS_ROUND_LIMIT)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return compute_user_stats(rounds)


@router.get("/{round_id}", response_model=Round)
def get_round(
    round_id: str,
    remote: bool = Query(default=False),
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    auth_headers: Optional[Dict[str, str]] = Depends(backend_auth_headers),
    service: RoundService = Depends(get_round_service),
    client: SupabaseClient = Depends(get_supabase_client),
) -> Round:
    owner = derive_user_id(api_key, user_id)
    if remote:
        try:
            found = client.fetch_round(round_id, auth_headers=auth_headers)
        except ProviderError as exc:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            )
        if found is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="round not found"
            )
        return found

    try:
        return service.get_round(round_id, user_id=owner)
    except RoundNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="round not found"
        )
    except RoundOwnershipError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="round not owned by user"
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


__all__ = ["router"]
