from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from roundcaddy.courses.bundle import parse_timestamp

DEFAULT_PAR = 72

ApproachResult = Literal[
    "green",
    "fringe",
    "greenside_rough",
    "bunker",
    "short",
    "long",
    "left",
    "right",
]


def normalize_played_at(value: object) -> object:
    """Coerce ISO strings and naive datetimes to timezone-aware UTC."""

    if isinstance(value, str):
        parsed = parse_timestamp(value)
        if parsed is None:
            raise ValueError(f"played_at is not an ISO-8601 timestamp: {value!r}")
        value = parsed
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return value


class HoleScore(BaseModel):
    """One hole as entered during a round; the input to strokes gained."""

    hole_number: int = Field(ge=1)
    par: int = Field(ge=3, le=6)
    score: Optional[int] = Field(default=None, ge=1)
    putts: Optional[int] = Field(default=None, ge=0)
    fairway_hit: Optional[bool] = None
    gir: Optional[bool] = None
    penalties: Optional[int] = Field(default=None, ge=0)
    yardage: Optional[int] = Field(default=None, gt=0)
    approach_distance: Optional[int] = Field(default=None, ge=0)
    approach_result: Optional[ApproachResult] = None
    first_putt_distance: Optional[int] = Field(default=None, ge=0)

    @property
    def relative_to_par(self) -> Optional[int]:
        if self.score is None:
            return None
        return self.score - self.par

    @property
    def score_description(self) -> str:
        diff = self.relative_to_par
        if diff is None:
            return ""
        if diff <= -3:
            return "Albatross"
        labels = {-2: "Eagle", -1: "Birdie", 0: "Par", 1: "Bogey", 2: "Double"}
        return labels.get(diff, f"+{diff}")


class Round(BaseModel):
    """A played round as stored by the backend. Never edited after saving."""

    id: str
    user_id: str
    course_id: Optional[str] = None
    course_name: str
    played_at: datetime
    total_score: int = Field(ge=1)
    total_putts: Optional[int] = Field(default=None, ge=0)
    fairways_hit: Optional[int] = Field(default=None, ge=0)
    fairways_total: Optional[int] = Field(default=None, ge=0)
    gir: Optional[int] = Field(default=None, ge=0)
    penalties: Optional[int] = Field(default=None, ge=0)
    course_rating: Optional[float] = None
    slope_rating: Optional[int] = None

    sg_total: Optional[float] = None
    sg_off_tee: Optional[float] = None
    sg_approach: Optional[float] = None
    sg_around_green: Optional[float] = None
    sg_putting: Optional[float] = None

    scoring_format: Optional[str] = None
    created_at: Optional[str] = None
    holes: Optional[List[HoleScore]] = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("played_at", mode="before")
    @classmethod
    def _parse_played_at(cls, value: object) -> object:
        return normalize_played_at(value)

    @model_validator(mode="after")
    def _fairways_within_total(self) -> "Round":
        if (
            self.fairways_hit is not None
            and self.fairways_total is not None
            and self.fairways_hit > self.fairways_total
        ):
            raise ValueError("fairways_hit cannot exceed fairways_total")
        return self

    @model_validator(mode="after")
    def _unique_hole_numbers(self) -> "Round":
        numbers = [hole.hole_number for hole in self.holes or []]
        if len(numbers) != len(set(numbers)):
            raise ValueError("duplicate hole_number in holes")
        return self

    def score_to_par(self, par: int = DEFAULT_PAR) -> str:
        diff = self.total_score - par
        if diff == 0:
            return "E"
        return f"+{diff}" if diff > 0 else str(diff)


__all__ = [
    "DEFAULT_PAR",
    "ApproachResult",
    "HoleScore",
    "Round",
    "normalize_played_at",
]
