from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

COURSE_WIDE_HOLE = 0


class Coordinate(BaseModel):
    lat: float
    lon: float

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, value: Any) -> Any:
        # Accept [lat, lon] as well as GeoJSON-ordered [lon, lat].
        if isinstance(value, (list, tuple)):
            if len(value) != 2:
                raise ValueError("coordinate arrays must have exactly two values")
            first, second = float(value[0]), float(value[1])
            if abs(first) > 90 and abs(second) <= 90:
                return {"lat": second, "lon": first}
            return {"lat": first, "lon": second}
        return value


class TeeLocation(BaseModel):
    tee: str
    lat: float
    lon: float

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lon=self.lon)


class Bunker(BaseModel):
    type: str = "bunker"
    polygon: List[Coordinate]
    center: Optional[Coordinate] = None

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, value: Any) -> Any:
        return "bunker" if value is None else value


class WaterHazard(BaseModel):
    polygon: List[Coordinate]
    center: Optional[Coordinate] = None


class TreeArea(BaseModel):
    polygon: List[Coordinate]
    center: Optional[Coordinate] = None


class YardageMarker(BaseModel):
    distance: int
    lat: float
    lon: float


class HoleData(BaseModel):
    hole_number: int
    par: int
    yardages: Optional[Dict[str, int]] = None
    green_center: Optional[Coordinate] = None
    green_front: Optional[Coordinate] = None
    green_back: Optional[Coordinate] = None

    tee_locations: Optional[List[TeeLocation]] = None
    fairway: Optional[List[Coordinate]] = None
    green: Optional[List[Coordinate]] = None
    rough: Optional[List[Coordinate]] = None
    bunkers: Optional[List[Bunker]] = None
    water_hazards: Optional[List[WaterHazard]] = None
    trees: Optional[List[TreeArea]] = None
    yardage_markers: Optional[List[YardageMarker]] = None

    @property
    def is_course_wide(self) -> bool:
        return self.hole_number == COURSE_WIDE_HOLE


class Course(BaseModel):
    id: str
    name: str
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    course_rating: Optional[float] = None
    slope_rating: Optional[int] = None
    par: Optional[int] = None
    holes: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    avg_rating: Optional[float] = None
    review_count: Optional[int] = None
    hole_data: Optional[List[HoleData]] = None
    updated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("hole_data")
    @classmethod
    def _unique_hole_numbers(
        cls, value: Optional[List[HoleData]]
    ) -> Optional[List[HoleData]]:
        if not value:
            return value
        seen: set[int] = set()
        for hole in value:
            if hole.hole_number in seen:
                raise ValueError(f"duplicate hole_number {hole.hole_number}")
            seen.add(hole.hole_number)
        return value

    @field_serializer("updated_at", "created_at")
    def _serialize_ts(self, value: Optional[datetime]) -> Optional[str]:
        if value is None:
            return None
        return value.isoformat()

    @property
    def location(self) -> str:
        parts = [part for part in (self.city, self.state, self.country) if part]
        return ", ".join(parts)

    @property
    def coordinate(self) -> Optional[Coordinate]:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(lat=self.latitude, lon=self.longitude)

    @property
    def has_hole_data(self) -> bool:
        return bool(self.hole_data)


class BundleMetadata(BaseModel):
    export_date: str = ""
    total_courses: int = 0
    version: int = 1


class CourseBundle(BaseModel):
    metadata: BundleMetadata
    courses: List[Course] = Field(default_factory=list)


__all__ = [
    "COURSE_WIDE_HOLE",
    "Bunker",
    "BundleMetadata",
    "Coordinate",
    "Course",
    "CourseBundle",
    "HoleData",
    "TeeLocation",
    "TreeArea",
    "WaterHazard",
    "YardageMarker",
]
