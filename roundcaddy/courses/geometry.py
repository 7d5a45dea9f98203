from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from .filters import haversine_miles
from .models import COURSE_WIDE_HOLE, Bunker, Coordinate, HoleData, WaterHazard

YARDS_PER_MILE = 1760.0


def playable_holes(hole_data: Iterable[HoleData] | None) -> List[HoleData]:
    """Holes a player can select; the course-wide container is excluded."""

    holes = [hole for hole in hole_data or [] if hole.hole_number != COURSE_WIDE_HOLE]
    return sorted(holes, key=lambda hole: hole.hole_number)


def course_wide_hazards(
    hole_data: Iterable[HoleData] | None,
) -> Tuple[List[Bunker], List[WaterHazard]]:
    for hole in hole_data or []:
        if hole.hole_number == COURSE_WIDE_HOLE:
            return list(hole.bunkers or []), list(hole.water_hazards or [])
    return [], []


def polygon_centroid(points: Sequence[Coordinate]) -> Coordinate:
    if not points:
        raise ValueError("polygon has no points")
    # Closed rings repeat the first vertex; drop it so it is not double-weighted.
    if len(points) > 1 and points[0] == points[-1]:
        points = points[:-1]
    lat = sum(point.lat for point in points) / len(points)
    lon = sum(point.lon for point in points) / len(points)
    return Coordinate(lat=lat, lon=lon)


def green_center(hole: HoleData) -> Optional[Coordinate]:
    if hole.green_center is not None:
        return hole.green_center
    if hole.green:
        return polygon_centroid(hole.green)
    if hole.green_front is not None and hole.green_back is not None:
        return Coordinate(
            lat=(hole.green_front.lat + hole.green_back.lat) / 2,
            lon=(hole.green_front.lon + hole.green_back.lon) / 2,
        )
    return None


def _anchor_points(hole: HoleData) -> List[Coordinate]:
    anchors: List[Coordinate] = []
    center = green_center(hole)
    if center is not None:
        anchors.append(center)
    if hole.tee_locations:
        anchors.append(hole.tee_locations[0].coordinate)
    return anchors


def nearest_hole(
    hole_data: Iterable[HoleData] | None, lat: float, lon: float
) -> Optional[HoleData]:
    best: Optional[HoleData] = None
    best_distance: Optional[float] = None
    for hole in playable_holes(hole_data):
        for anchor in _anchor_points(hole):
            distance = haversine_miles(lat, lon, anchor.lat, anchor.lon)
            if best_distance is None or distance < best_distance:
                best, best_distance = hole, distance
    return best


def distance_to_green_yards(hole: HoleData, lat: float, lon: float) -> Optional[int]:
    center = green_center(hole)
    if center is None:
        return None
    miles = haversine_miles(lat, lon, center.lat, center.lon)
    return int(round(miles * YARDS_PER_MILE))


def hole_yardage(hole: HoleData, tee: str) -> Optional[int]:
    if not hole.yardages:
        return None
    wanted = tee.casefold()
    for name, yards in hole.yardages.items():
        if name.casefold() == wanted:
            return yards
    return None


__all__ = [
    "course_wide_hazards",
    "distance_to_green_yards",
    "green_center",
    "hole_yardage",
    "nearest_hole",
    "playable_holes",
    "polygon_centroid",
]
