from .models import (
    COURSE_WIDE_HOLE,
    BundleMetadata,
    Bunker,
    Coordinate,
    Course,
    CourseBundle,
    HoleData,
    TeeLocation,
    TreeArea,
    WaterHazard,
    YardageMarker,
)

__all__ = [
    "COURSE_WIDE_HOLE",
    "BundleMetadata",
    "Bunker",
    "Coordinate",
    "Course",
    "CourseBundle",
    "HoleData",
    "TeeLocation",
    "TreeArea",
    "WaterHazard",
    "YardageMarker",
]
