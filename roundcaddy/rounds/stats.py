from __future__ import annotations

from statistics import mean
from typing import Iterable, List, Optional

from pydantic import BaseModel

from .models import Round

GREENS_PER_ROUND = 18
HOLES_PER_ROUND = 18
HANDICAP_MIN_ROUNDS = 3
HANDICAP_WINDOW = 20
STANDARD_SLOPE = 113
HANDICAP_FACTOR = 0.96


class UserStats(BaseModel):
    rounds_played: int = 0
    average_score: Optional[float] = None
    best_score: Optional[int] = None
    handicap_index: Optional[float] = None

    avg_sg_total: Optional[float] = None
    avg_sg_off_tee: Optional[float] = None
    avg_sg_approach: Optional[float] = None
    avg_sg_around_green: Optional[float] = None
    avg_sg_putting: Optional[float] = None

    fairway_pct: Optional[float] = None
    gir_pct: Optional[float] = None
    putts_per_hole: Optional[float] = None
    scrambling_pct: Optional[float] = None


def _mean_of(values: Iterable[Optional[float]]) -> Optional[float]:
    present = [v for v in values if v is not None]
    if not present:
        return None
    return round(mean(present), 2)


def handicap_index(rounds: List[Round]) -> Optional[float]:
    """Simplified WHS index over the most recent rated rounds.

    *rounds* must be ordered most recent first.
    """

    if len(rounds) < HANDICAP_MIN_ROUNDS:
        return None
    rated = [
        r
        for r in rounds[:HANDICAP_WINDOW]
        if r.course_rating is not None and r.slope_rating
    ]
    if not rated:
        return None
    differentials = sorted(
        (r.total_score - r.course_rating) * STANDARD_SLOPE / r.slope_rating  # type: ignore[operator]
        for r in rated
    )
    best = differentials[: max(1, len(differentials) // 2)]
    return round(mean(best) * HANDICAP_FACTOR, 1)


def compute_user_stats(rounds: Iterable[Round]) -> UserStats:
    ordered = sorted(rounds, key=lambda r: r.played_at, reverse=True)
    if not ordered:
        return UserStats()

    scores = [r.total_score for r in ordered]

    fairway_rounds = [
        r for r in ordered if r.fairways_hit is not None and r.fairways_total
    ]
    fairway_pct = None
    if fairway_rounds:
        hit = sum(r.fairways_hit or 0 for r in fairway_rounds)
        total = sum(r.fairways_total or 0 for r in fairway_rounds)
        fairway_pct = round(hit / total * 100, 1)

    gir_rounds = [r.gir for r in ordered if r.gir is not None]
    gir_pct = None
    if gir_rounds:
        gir_pct = round(sum(gir_rounds) / (len(gir_rounds) * GREENS_PER_ROUND) * 100, 1)

    putt_rounds = [r.total_putts for r in ordered if r.total_putts is not None]
    putts_per_hole = None
    if putt_rounds:
        putts_per_hole = round(sum(putt_rounds) / (len(putt_rounds) * HOLES_PER_ROUND), 2)

    around_green = _mean_of(r.sg_around_green for r in ordered)
    scrambling = None
    if around_green is not None:
        scrambling = round(min(100.0, max(0.0, 50 + around_green * 10)), 1)

    return UserStats(
        rounds_played=len(ordered),
        average_score=round(mean(scores), 1),
        best_score=min(scores),
        handicap_index=handicap_index(ordered),
        avg_sg_total=_mean_of(r.sg_total for r in ordered),
        avg_sg_off_tee=_mean_of(r.sg_off_tee for r in ordered),
        avg_sg_approach=_mean_of(r.sg_approach for r in ordered),
        avg_sg_around_green=around_green,
        avg_sg_putting=_mean_of(r.sg_putting for r in ordered),
        fairway_pct=fairway_pct,
        gir_pct=gir_pct,
        putts_per_hole=putts_per_hole,
        scrambling_pct=scrambling,
    )


__all__ = ["UserStats", "compute_user_stats", "handicap_index"]
