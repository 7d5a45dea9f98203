from .models import CourseNote, NoteCategory, VoteType
from .store import (
    NoteNotFound,
    NoteOwnershipError,
    PersonalNoteStore,
    apply_vote,
    community_notes_for_hole,
    get_note_store,
)

__all__ = [
    "CourseNote",
    "NoteCategory",
    "NoteNotFound",
    "NoteOwnershipError",
    "PersonalNoteStore",
    "VoteType",
    "apply_vote",
    "community_notes_for_hole",
    "get_note_store",
]
