from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class NoteCategory(str, Enum):
    GENERAL = "General"
    TEE_SHOT = "Tee Shot"
    APPROACH = "Approach"
    PUTTING = "Putting"
    HAZARDS = "Hazards"
    STRATEGY = "Strategy"
    CONDITIONS = "Conditions"


class VoteType(str, Enum):
    NONE = "none"
    UP = "up"
    DOWN = "down"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CourseNote(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    course_id: str
    hole_number: int = Field(ge=0)
    content: str = Field(min_length=1)
    category: NoteCategory = NoteCategory.GENERAL
    is_personal: bool = True
    votes: int = 0
    user_vote: VoteType = VoteType.NONE
    author_name: Optional[str] = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: Optional[datetime] = None


__all__ = ["CourseNote", "NoteCategory", "VoteType"]
