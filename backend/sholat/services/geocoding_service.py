from dataclasses import asdict, dataclass
from typing import Dict, List, Optional

from .helpers.constants import CITY_TABLE
from .prayer_time.domain import GeoCoordinate
from .prayer_time.zone_resolver import ZONE_OFFSETS


@dataclass(frozen=True)
class City:
    key: str
    name: str
    province: str
    latitude: float
    longitude: float
    timezone: str

    @property
    def utc_offset(self) -> float:
        """Static offset of the city's zone; Indonesia observes no DST."""
        return ZONE_OFFSETS[self.timezone]

    @property
    def coordinate(self) -> GeoCoordinate:
        return GeoCoordinate(self.latitude, self.longitude)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["utc_offset"] = self.utc_offset
        return data


CITIES: List[City] = [City(*row) for row in CITY_TABLE]
_CITIES_BY_KEY: Dict[str, City] = {city.key: city for city in CITIES}


def _normalize(name: str) -> str:
    return " ".join(name.strip().lower().split())


def get_city(key: str) -> Optional[City]:
    return _CITIES_BY_KEY.get(_normalize(key))


def list_cities() -> List[City]:
    return list(CITIES)


def find_city(query: Optional[str]) -> Optional[City]:
    """
    Resolves a free-text city name against the gazetteer.

    Exact key wins, then exact display name, then the city whose key or name
    shares the longest substring with the query (the query contained in the
    name, or the name contained in the query). Equal overlaps resolve to the
    city listed first, so the same query always yields the same city.
    """
    if not query:
        return None
    normalized = _normalize(query)
    if not normalized:
        return None

    if normalized in _CITIES_BY_KEY:
        return _CITIES_BY_KEY[normalized]

    for city in CITIES:
        if city.name.lower() == normalized:
            return city

    best, best_overlap = None, 0
    for city in CITIES:
        overlap = 0
        for candidate in (city.key, city.name.lower()):
            if normalized in candidate:
                overlap = max(overlap, len(normalized))
            elif candidate in normalized:
                overlap = max(overlap, len(candidate))
        if overlap > best_overlap:
            best, best_overlap = city, overlap
    return best
