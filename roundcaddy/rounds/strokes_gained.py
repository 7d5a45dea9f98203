"""Strokes gained per hole from tour benchmark tables.

Benchmarks give the expected strokes to hole out from a lie at a distance.
Long-game tables are in yards, putting tables in feet. A shot's strokes
gained is ``expected_before - expected_after - 1``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import HoleScore, Round

BENCHMARKS: Dict[str, List[Tuple[int, float]]] = {
    "tee": [
        (100, 2.92), (125, 2.99), (150, 3.08), (175, 3.18), (200, 3.32),
        (225, 3.45), (250, 3.58), (275, 3.71), (300, 3.84), (325, 3.97),
        (350, 4.08), (375, 4.17), (400, 4.28), (425, 4.41), (450, 4.54),
        (475, 4.69), (500, 4.79), (525, 4.96), (550, 5.09), (575, 5.24),
        (600, 5.39),
    ],
    "fairway": [
        (25, 2.40), (50, 2.60), (75, 2.72), (100, 2.87), (125, 2.95),
        (150, 3.00), (175, 3.08), (200, 3.19), (225, 3.32), (250, 3.48),
        (275, 3.65), (300, 3.81),
    ],
    "rough": [
        (25, 2.53), (50, 2.73), (75, 2.86), (100, 2.98), (125, 3.08),
        (150, 3.17), (175, 3.28), (200, 3.42), (225, 3.58), (250, 3.75),
        (275, 3.92), (300, 4.08),
    ],
    "bunker": [
        (10, 2.43), (20, 2.53), (30, 2.68), (40, 2.83), (50, 2.97),
        (75, 3.15), (100, 3.32), (125, 3.52), (150, 3.72),
    ],
    "recovery": [
        (25, 2.77), (50, 2.96), (75, 3.12), (100, 3.24), (125, 3.38),
        (150, 3.51), (175, 3.66), (200, 3.82),
    ],
    # Expected putts by first-putt distance in feet.
    "putting": [
        (1, 1.001), (2, 1.009), (3, 1.044), (4, 1.115), (5, 1.211),
        (6, 1.299), (7, 1.373), (8, 1.438), (9, 1.495), (10, 1.546),
        (12, 1.635), (14, 1.710), (16, 1.774), (18, 1.829), (20, 1.877),
        (25, 1.970), (30, 2.040), (35, 2.095), (40, 2.140), (45, 2.179),
        (50, 2.213), (60, 2.267), (70, 2.310), (80, 2.346), (90, 2.376),
    ],
    # Value of a ball finishing on the green at a putt distance in feet.
    "on_green": [
        (5, 1.26), (10, 1.55), (15, 1.72), (20, 1.88), (25, 1.97),
        (30, 2.04), (40, 2.14), (50, 2.22), (60, 2.27),
    ],
}  # fmt: skip

DEFAULT_YARDAGE_BY_PAR = {3: 165, 4: 400, 5: 520}
DEFAULT_YARDAGE = 400
AVERAGE_DRIVE_YARDS = 250
PAR_FIVE_LAYUP_YARDS = 150

# Expected strokes after a missed green, by where the approach finished.
_MISSED_GREEN_EXPECTED = {"fringe": 2.4, "greenside_rough": 2.6}
_MISSED_GREEN_DEFAULT = 2.55
_CHIP_EXPECTED = {"fringe": 2.3, "greenside_rough": 2.5, "bunker": 2.7}
_CHIP_DEFAULT = 2.5
_GREENSIDE_BUNKER_YARDS = 20

AREA_ADVICE = {
    "Off the Tee": "Focus on driving accuracy and distance control",
    "Approach": "Work on iron play and distance control with approaches",
    "Around the Green": "Practice chipping, pitching, and bunker play",
    "Putting": "Focus on speed control and short putts",
}


def _validate_benchmark(points: Sequence[Tuple[int, float]]) -> None:
    last = None
    for distance, _ in points:
        if last is not None and distance <= last:
            raise ValueError("benchmark distances must be strictly increasing")
        last = distance


for _table in BENCHMARKS.values():
    _validate_benchmark(_table)


def interpolate(points: Sequence[Tuple[int, float]], distance: float) -> float:
    """Piecewise-linear lookup, clamped to the first and last entries."""

    if not points:
        raise ValueError("points must not be empty")
    if distance <= points[0][0]:
        return points[0][1]
    if distance >= points[-1][0]:
        return points[-1][1]
    for (x1, y1), (x2, y2) in zip(points, points[1:]):
        if x1 <= distance <= x2:
            return y1 + (distance - x1) / (x2 - x1) * (y2 - y1)
    return points[-1][1]


def expected_strokes(lie: str, distance: float) -> float:
    return interpolate(BENCHMARKS[lie], distance)


@dataclass(frozen=True)
class StrokesGained:
    off_tee: float = 0.0
    approach: float = 0.0
    around_green: float = 0.0
    putting: float = 0.0
    total: float = 0.0

    def areas(self) -> List[Tuple[str, float]]:
        return [
            ("Off the Tee", self.off_tee),
            ("Approach", self.approach),
            ("Around the Green", self.around_green),
            ("Putting", self.putting),
        ]


def _hundredths(value: float) -> float:
    return round(value * 100) / 100


def default_yardage(par: int) -> int:
    return DEFAULT_YARDAGE_BY_PAR.get(par, DEFAULT_YARDAGE)


def _approach_distance(hole: HoleScore, yardage: int) -> int:
    if hole.approach_distance is not None:
        return hole.approach_distance
    if hole.par == 3:
        return yardage
    if hole.par == 4:
        return max(50, yardage - AVERAGE_DRIVE_YARDS)
    return PAR_FIVE_LAYUP_YARDS


def _first_putt_distance(hole: HoleScore, score: int, putts: int) -> int:
    if hole.first_putt_distance is not None:
        return hole.first_putt_distance
    if hole.gir:
        return 25
    if score == hole.par and putts == 1:
        return 3
    return 15


def _missed_green_expected(result: Optional[str]) -> float:
    if result == "bunker":
        return expected_strokes("bunker", _GREENSIDE_BUNKER_YARDS)
    return _MISSED_GREEN_EXPECTED.get(result or "", _MISSED_GREEN_DEFAULT)


def hole_strokes_gained(
    hole: HoleScore, yardage: Optional[int] = None
) -> StrokesGained:
    """Strokes gained by area for one scored hole.

    Unscored holes gain nothing. Missing approach or first-putt distances are
    estimated from par, yardage and the putt count.
    """

    if hole.score is None:
        return StrokesGained()
    score = hole.score
    putts = hole.putts or 0
    gir = bool(hole.gir)
    yards = yardage or hole.yardage or default_yardage(hole.par)
    approach = _approach_distance(hole, yards)
    first_putt = _first_putt_distance(hole, score, putts)

    putting = 0.0
    if putts > 0 and first_putt > 0:
        putting = expected_strokes("putting", first_putt) - putts

    off_tee = 0.0
    if hole.par >= 4:
        if hole.fairway_hit is None:
            after_tee = (
                expected_strokes("fairway", approach)
                + expected_strokes("rough", approach)
            ) / 2
        else:
            after_tee = expected_strokes(
                "fairway" if hole.fairway_hit else "rough", approach
            )
        off_tee = expected_strokes("tee", yards) - after_tee - 1

    approach_sg = 0.0
    if approach > 0:
        start = expected_strokes(
            "fairway" if hole.fairway_hit else "rough", approach
        )
        if gir:
            end = expected_strokes("on_green", first_putt)
        else:
            end = _missed_green_expected(hole.approach_result)
        approach_sg = start - end - 1

    around_green = 0.0
    if not gir:
        shots_around = score - putts - (2 if hole.par >= 4 else 1)
        if shots_around > 0:
            chip = _CHIP_EXPECTED.get(hole.approach_result or "", _CHIP_DEFAULT)
            around_green = (
                chip - expected_strokes("on_green", first_putt) - shots_around
            )

    return StrokesGained(
        off_tee=_hundredths(off_tee),
        approach=_hundredths(approach_sg),
        around_green=_hundredths(around_green),
        putting=_hundredths(putting),
        total=_hundredths(off_tee + approach_sg + around_green + putting),
    )


def round_strokes_gained(
    holes: Iterable[HoleScore], yardages: Optional[Sequence[int]] = None
) -> StrokesGained:
    """Sum of per-hole strokes gained; ``yardages`` lines up with ``holes``."""

    totals = [0.0] * 5
    for index, hole in enumerate(holes):
        yardage = None
        if yardages is not None and index < len(yardages):
            yardage = yardages[index]
        result = hole_strokes_gained(hole, yardage)
        for slot, value in enumerate(
            (
                result.off_tee,
                result.approach,
                result.around_green,
                result.putting,
                result.total,
            )
        ):
            totals[slot] += value
    return StrokesGained(*(_hundredths(value) for value in totals))


def weakest_area(sg: StrokesGained) -> Tuple[str, str]:
    name, _ = min(sg.areas(), key=lambda area: area[1])
    return name, AREA_ADVICE[name]


def strongest_area(sg: StrokesGained) -> str:
    return max(sg.areas(), key=lambda area: area[1])[0]


def with_strokes_gained(round_: Round) -> Round:
    """Fill the round's missing ``sg_*`` fields from its hole entries."""

    if not round_.holes:
        return round_
    sg = round_strokes_gained(round_.holes)
    derived = {
        "sg_off_tee": sg.off_tee,
        "sg_approach": sg.approach,
        "sg_around_green": sg.around_green,
        "sg_putting": sg.putting,
        "sg_total": sg.total,
    }
    missing = {
        field: value
        for field, value in derived.items()
        if getattr(round_, field) is None
    }
    if not missing:
        return round_
    return round_.model_copy(update=missing)


__all__ = [
    "BENCHMARKS",
    "StrokesGained",
    "default_yardage",
    "expected_strokes",
    "hole_strokes_gained",
    "interpolate",
    "round_strokes_gained",
    "strongest_area",
    "weakest_area",
    "with_strokes_gained",
]
