from .playslike import (
    PlaysLikeAdjustments,
    PlaysLikeConditions,
    describe_adjustments,
    plays_like,
)

__all__ = [
    "PlaysLikeAdjustments",
    "PlaysLikeConditions",
    "describe_adjustments",
    "plays_like",
]
