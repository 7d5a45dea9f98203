from .models import DEFAULT_PAR, HoleScore, Round
from .service import (
    RoundAlreadyExists,
    RoundNotFound,
    RoundOwnershipError,
    RoundService,
    get_round_service,
)
from .stats import UserStats, compute_user_stats
from .strokes_gained import (
    StrokesGained,
    hole_strokes_gained,
    round_strokes_gained,
    with_strokes_gained,
)

__all__ = [
    "DEFAULT_PAR",
    "HoleScore",
    "Round",
    "RoundAlreadyExists",
    "RoundNotFound",
    "RoundOwnershipError",
    "RoundService",
    "StrokesGained",
    "UserStats",
    "compute_user_stats",
    "get_round_service",
    "hole_strokes_gained",
    "round_strokes_gained",
    "with_strokes_gained",
]
