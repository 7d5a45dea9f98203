from __future__ import annotations

from prometheus_client import Counter, Histogram

from . import REGISTRY

PLAYSLIKE_EVALUATIONS_TOTAL = Counter(
    "playslike_evaluations_total",
    "Count of plays-like distance evaluations",
    registry=REGISTRY,
)

PLAYSLIKE_ADJUSTMENT_YARDS = Histogram(
    "playslike_adjustment_yards",
    "Magnitude of the total plays-like adjustment (yards)",
    buckets=(0.0, 1.0, 2.5, 5.0, 7.5, 10.0, 15.0, 20.0, 30.0),
    registry=REGISTRY,
)


def observe_adjustment(total_yards: int) -> None:
    PLAYSLIKE_EVALUATIONS_TOTAL.inc()
    PLAYSLIKE_ADJUSTMENT_YARDS.observe(abs(total_yards))


__all__ = [
    "PLAYSLIKE_ADJUSTMENT_YARDS",
    "PLAYSLIKE_EVALUATIONS_TOTAL",
    "observe_adjustment",
]
