"""Personal and community course notes."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel, Field

from roundcaddy.api.user_header import UserIdHeader, derive_user_id
from roundcaddy.notes.models import CourseNote, NoteCategory, VoteType
from roundcaddy.notes.store import (
    ALL_HOLES,
    NoteNotFound,
    NoteOwnershipError,
    PersonalNoteStore,
    apply_vote,
    community_notes_for_hole,
    get_note_store,
)
from roundcaddy.providers import ProviderError, SupabaseClient, get_supabase_client
from roundcaddy.security import require_api_key

router = APIRouter(
    prefix="/api/courses/{course_id}/notes",
    tags=["notes"],
    dependencies=[Depends(require_api_key)],
)

logger = logging.getLogger(__name__)


class NoteCreateRequest(BaseModel):
    hole_number: int = Field(default=ALL_HOLES, ge=0)
    content: str = Field(min_length=1)
    category: NoteCategory = NoteCategory.GENERAL
    author_name: Optional[str] = None


class NoteUpdateRequest(BaseModel):
    content: Optional[str] = Field(default=None, min_length=1)
    category: Optional[NoteCategory] = None


class VoteRequest(BaseModel):
    note_id: str
    vote: VoteType


def _community_notes(client: SupabaseClient, course_id: str) -> List[CourseNote]:
    try:
        return client.fetch_community_notes(course_id)
    except ProviderError as exc:
        logger.warning(
            "community notes fetch failed",
            extra={"course_id": course_id, "error": str(exc)},
        )
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@router.get("", response_model=List[CourseNote])
def list_personal_notes(
    course_id: str,
    hole: int = Query(default=ALL_HOLES, ge=0),
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    store: PersonalNoteStore = Depends(get_note_store),
) -> List[CourseNote]:
    owner = derive_user_id(api_key, user_id)
    return store.notes_for_hole(owner, course_id, hole)


@router.post("", response_model=CourseNote, status_code=status.HTTP_201_CREATED)
def add_personal_note(
    course_id: str,
    payload: NoteCreateRequest,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    store: PersonalNoteStore = Depends(get_note_store),
) -> CourseNote:
    return store.add(
        derive_user_id(api_key, user_id),
        course_id,
        payload.hole_number,
        payload.content,
        category=payload.category,
        author_name=payload.author_name,
    )


@router.get("/community", response_model=List[CourseNote])
def list_community_notes(
    course_id: str,
    hole: int = Query(default=ALL_HOLES, ge=0),
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    store: PersonalNoteStore = Depends(get_note_store),
    client: SupabaseClient = Depends(get_supabase_client),
) -> List[CourseNote]:
    owner = derive_user_id(api_key, user_id)
    notes = store.with_recorded_votes(
        owner, course_id, _community_notes(client, course_id)
    )
    return community_notes_for_hole(notes, hole)


@router.post("/community/vote", response_model=CourseNote)
def vote_on_note(
    course_id: str,
    payload: VoteRequest,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    store: PersonalNoteStore = Depends(get_note_store),
    client: SupabaseClient = Depends(get_supabase_client),
) -> CourseNote:
    owner = derive_user_id(api_key, user_id)
    notes = store.with_recorded_votes(
        owner, course_id, _community_notes(client, course_id)
    )
    target = next((note for note in notes if note.id == payload.note_id), None)
    if target is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="note not found"
        )
    voted = apply_vote(target, payload.vote)
    store.record_vote(owner, course_id, voted.id, voted.user_vote)
    return voted


@router.put("/{note_id}", response_model=CourseNote)
def update_personal_note(
    course_id: str,
    note_id: str,
    payload: NoteUpdateRequest,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    store: PersonalNoteStore = Depends(get_note_store),
) -> CourseNote:
    try:
        return store.update(
            derive_user_id(api_key, user_id),
            course_id,
            note_id,
            content=payload.content,
            category=payload.category,
        )
    except NoteNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="note not found"
        )
    except NoteOwnershipError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="note is not personal"
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_personal_note(
    course_id: str,
    note_id: str,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    store: PersonalNoteStore = Depends(get_note_store),
) -> Response:
    try:
        store.delete(derive_user_id(api_key, user_id), course_id, note_id)
    except NoteNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="note not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
