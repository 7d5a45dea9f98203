from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class ContributorStats(BaseModel):
    id: str
    user_id: str
    reputation_score: float = 0.0
    contributions_count: int = 0
    verified_contributions_count: int = 0
    confirmations_received: int = 0
    is_trusted_contributor: bool = False


class CourseDiscussion(BaseModel):
    id: str
    course_id: str
    user_id: str
    title: str
    content: str
    created_at: str
    reply_count: Optional[int] = None
    author_name: Optional[str] = None


__all__ = ["ContributorStats", "CourseDiscussion"]
