"""Course catalogue filtering: name quality, country aliases, search, nearby."""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional, Tuple

from .models import Course

UNKNOWN_COUNTRY = "Unknown"
EARTH_RADIUS_MILES = 3959.0

# Display name -> values the backend stores in the country column.
COUNTRY_ALIASES: Dict[str, List[str]] = {
    "United States": ["US", "USA", "United States"],
    "United Kingdom": [
        "GB",
        "UK",
        "United Kingdom",
        "Great Britain",
        "England",
        "Scotland",
        "Wales",
        "Northern Ireland",
    ],
    "Ireland": ["IE", "Ireland", "Republic of Ireland", "Eire"],
    "Canada": ["CA", "Canada"],
    "Australia": ["AU", "Australia"],
    "Germany": ["DE", "Germany"],
    "France": ["FR", "France"],
    "Italy": ["IT", "Italy"],
    "Spain": ["ES", "Spain"],
    "Netherlands": ["NL", "Netherlands"],
    "Sweden": ["SE", "Sweden"],
    "Norway": ["NO", "Norway"],
    "Denmark": ["DK", "Denmark"],
    "Finland": ["FI", "Finland"],
    "Japan": ["JP", "Japan"],
    "South Korea": ["KR", "South Korea", "Korea"],
    "China": ["CN", "China"],
    "New Zealand": ["NZ", "New Zealand"],
    "Mexico": ["MX", "Mexico"],
    "Brazil": ["BR", "Brazil"],
    "Argentina": ["AR", "Argentina"],
    "South Africa": ["ZA", "South Africa"],
    "India": ["IN", "India"],
    "Thailand": ["TH", "Thailand"],
    "Singapore": ["SG", "Singapore"],
    "Malaysia": ["MY", "Malaysia"],
    "Indonesia": ["ID", "Indonesia"],
    "Philippines": ["PH", "Philippines"],
    "Portugal": ["PT", "Portugal"],
    "Greece": ["GR", "Greece"],
    "Turkey": ["TR", "Turkey"],
    "Poland": ["PL", "Poland"],
    "Czech Republic": ["CZ", "Czech Republic"],
    "Switzerland": ["CH", "Switzerland"],
    "Austria": ["AT", "Austria"],
    "Belgium": ["BE", "Belgium"],
}

_SHORT_NAME_ALLOWLIST = {"GC", "CC"}


def country_codes(name: str) -> List[str]:
    return COUNTRY_ALIASES.get(name, [name])


def country_from_region(code: str | None) -> Optional[str]:
    """Map a locale region code (``"US"``) to its display country."""

    if not code:
        return None
    upper = code.strip().upper()
    for display, aliases in COUNTRY_ALIASES.items():
        if aliases and aliases[0] == upper:
            return display
    return None


def _is_unknown_selection(selected: str) -> bool:
    return UNKNOWN_COUNTRY.casefold() in selected.casefold()


def matches_country(course: Course, selected: str) -> bool:
    if course.country is None:
        return _is_unknown_selection(selected)
    country = course.country.strip()
    if country.casefold() == UNKNOWN_COUNTRY.casefold():
        return _is_unknown_selection(selected)
    # A blank country is neither unknown nor any real country.
    if not country:
        return False
    wanted = {code.casefold() for code in country_codes(selected)}
    return country.casefold() in wanted


def is_displayable_name(name: str) -> bool:
    stripped = name.strip()
    if not stripped:
        return False
    if all(ch.isdigit() or ch.isspace() for ch in stripped):
        return False
    if len(stripped) < 3 and stripped.upper() not in _SHORT_NAME_ALLOWLIST:
        return False
    alphanumeric = sum(1 for ch in stripped if ch.isalnum())
    return alphanumeric / len(stripped) >= 0.5


def filter_courses(
    courses: Iterable[Course],
    country: str | None = None,
    search: str | None = None,
) -> List[Course]:
    filtered = [course for course in courses if is_displayable_name(course.name)]
    if country:
        filtered = [course for course in filtered if matches_country(course, country)]
    if search:
        needle = search.casefold()
        filtered = [course for course in filtered if needle in course.name.casefold()]
    return filtered


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def nearby_courses(
    courses: Iterable[Course], lat: float, lon: float, radius_miles: float
) -> List[Tuple[Course, float]]:
    """Courses within *radius_miles*, nearest first, paired with their distance."""

    hits: List[Tuple[Course, float]] = []
    for course in courses:
        if course.latitude is None or course.longitude is None:
            continue
        distance = haversine_miles(lat, lon, course.latitude, course.longitude)
        if distance <= radius_miles:
            hits.append((course, distance))
    hits.sort(key=lambda item: item[1])
    return hits


__all__ = [
    "COUNTRY_ALIASES",
    "UNKNOWN_COUNTRY",
    "country_codes",
    "country_from_region",
    "filter_courses",
    "haversine_miles",
    "is_displayable_name",
    "matches_country",
    "nearby_courses",
]
