"""Personal course notes on the local key-value store, plus vote bookkeeping.

Both are kept per user and per course, so one golfer never sees another's
private notes or votes.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from functools import lru_cache
from typing import Dict, Iterable, List, Optional

from pydantic import TypeAdapter, ValidationError

from roundcaddy.config import get_settings
from roundcaddy.storage.kv import KeyValueStore

from .models import CourseNote, NoteCategory, VoteType

logger = logging.getLogger(__name__)

ALL_HOLES = 0
NOTES_FILENAME = "notes.json"
_VOTE_WEIGHT = {VoteType.NONE: 0, VoteType.UP: 1, VoteType.DOWN: -1}
_NOTES_ADAPTER = TypeAdapter(List[CourseNote])


class NoteNotFound(Exception):
    pass


class NoteOwnershipError(Exception):
    """Raised when a personal-only operation targets a community note."""


def _notes_key(user_id: str, course_id: str) -> str:
    return f"personal_notes_{user_id}_{course_id}"


def _votes_key(user_id: str, course_id: str) -> str:
    return f"note_votes_{user_id}_{course_id}"


class PersonalNoteStore:
    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    def _load(self, user_id: str, course_id: str) -> List[CourseNote]:
        raw = self._kv.get(_notes_key(user_id, course_id))
        if not raw:
            return []
        try:
            return _NOTES_ADAPTER.validate_python(raw)
        except ValidationError:
            logger.warning(
                "discarding unreadable personal notes",
                extra={"user_id": user_id, "course_id": course_id},
            )
            return []

    def _store(
        self, user_id: str, course_id: str, notes: List[CourseNote]
    ) -> None:
        self._kv.set(
            _notes_key(user_id, course_id),
            _NOTES_ADAPTER.dump_python(notes, mode="json"),
        )

    def all_notes(self, user_id: str, course_id: str) -> List[CourseNote]:
        return self._load(user_id, course_id)

    def notes_for_hole(
        self, user_id: str, course_id: str, hole_number: int
    ) -> List[CourseNote]:
        notes = self._load(user_id, course_id)
        if hole_number == ALL_HOLES:
            return notes
        return [note for note in notes if note.hole_number == hole_number]

    def add(
        self,
        user_id: str,
        course_id: str,
        hole_number: int,
        content: str,
        category: NoteCategory = NoteCategory.GENERAL,
        author_name: Optional[str] = None,
    ) -> CourseNote:
        note = CourseNote(
            id=str(uuid.uuid4()),
            course_id=course_id,
            hole_number=hole_number,
            content=content,
            category=category,
            is_personal=True,
            author_name=author_name,
            created_at=datetime.now(timezone.utc),
        )
        notes = self._load(user_id, course_id)
        notes.append(note)
        self._store(user_id, course_id, notes)
        return note

    def update(
        self,
        user_id: str,
        course_id: str,
        note_id: str,
        *,
        content: Optional[str] = None,
        category: Optional[NoteCategory] = None,
    ) -> CourseNote:
        notes = self._load(user_id, course_id)
        for position, note in enumerate(notes):
            if note.id != note_id:
                continue
            if not note.is_personal:
                raise NoteOwnershipError(note_id)
            changes: dict = {"updated_at": datetime.now(timezone.utc)}
            if content is not None:
                changes["content"] = content
            if category is not None:
                changes["category"] = category
            # Revalidate so an empty content string is still rejected.
            updated = CourseNote.model_validate({**note.model_dump(), **changes})
            notes[position] = updated
            self._store(user_id, course_id, notes)
            return updated
        raise NoteNotFound(note_id)

    def delete(self, user_id: str, course_id: str, note_id: str) -> None:
        notes = self._load(user_id, course_id)
        remaining = [note for note in notes if note.id != note_id]
        if len(remaining) == len(notes):
            raise NoteNotFound(note_id)
        self._store(user_id, course_id, remaining)

    # Votes cast on community notes, keyed by note id
    def recorded_votes(self, user_id: str, course_id: str) -> Dict[str, VoteType]:
        raw = self._kv.get(_votes_key(user_id, course_id)) or {}
        return {note_id: VoteType(value) for note_id, value in raw.items()}

    def record_vote(
        self, user_id: str, course_id: str, note_id: str, vote: VoteType
    ) -> None:
        recorded = self.recorded_votes(user_id, course_id)
        votes = {k: v.value for k, v in recorded.items()}
        if vote == VoteType.NONE:
            votes.pop(note_id, None)
        else:
            votes[note_id] = vote.value
        self._kv.set(_votes_key(user_id, course_id), votes)

    def with_recorded_votes(
        self, user_id: str, course_id: str, notes: Iterable[CourseNote]
    ) -> List[CourseNote]:
        # Local votes are not pushed upstream, so fold them into the tally here.
        votes = self.recorded_votes(user_id, course_id)
        return [
            note.model_copy(
                update={
                    "user_vote": votes[note.id],
                    "votes": note.votes + _VOTE_WEIGHT[votes[note.id]],
                }
            )
            if note.id in votes
            else note
            for note in notes
        ]


def apply_vote(note: CourseNote, vote: VoteType) -> CourseNote:
    """Apply a user's up/down vote; repeating the same vote withdraws it."""

    if note.is_personal:
        raise NoteOwnershipError(note.id)
    if vote == VoteType.NONE:
        new_vote = VoteType.NONE
    elif note.user_vote == vote:
        new_vote = VoteType.NONE
    else:
        new_vote = vote

    delta = _VOTE_WEIGHT[new_vote] - _VOTE_WEIGHT[note.user_vote]
    return note.model_copy(update={"votes": note.votes + delta, "user_vote": new_vote})


def community_notes_for_hole(
    notes: Iterable[CourseNote], hole_number: int
) -> List[CourseNote]:
    selected = [
        note
        for note in notes
        if hole_number == ALL_HOLES or note.hole_number == hole_number
    ]
    return sorted(selected, key=lambda note: note.votes, reverse=True)


@lru_cache(maxsize=1)
def get_note_store() -> PersonalNoteStore:
    return PersonalNoteStore(KeyValueStore(get_settings().data_dir / NOTES_FILENAME))


__all__ = [
    "ALL_HOLES",
    "NoteNotFound",
    "NoteOwnershipError",
    "PersonalNoteStore",
    "apply_vote",
    "community_notes_for_hole",
    "get_note_store",
]
