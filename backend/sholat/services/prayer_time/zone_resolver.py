# This module contains the functions that decide which clock a schedule is expressed in.
from typing import Optional

from ...exceptions import ValidationError

FIXED_STRATEGY = "fixed"
LONGITUDE_BUCKET_STRATEGY = "longitude_bucket"
TIMEZONE_STRATEGIES = (FIXED_STRATEGY, LONGITUDE_BUCKET_STRATEGY)

ZONE_OFFSETS = {
    "Asia/Jakarta": 7.0,
    "Asia/Makassar": 8.0,
    "Asia/Jayapura": 9.0,
}

ZONE_ABBREVIATIONS = {
    "Asia/Jakarta": "WIB",
    "Asia/Makassar": "WITA",
    "Asia/Jayapura": "WIT",
}


def longitude_bucket_zone(longitude: float) -> str:
    """Indonesian zone name by longitude band: west of 105E, west of 120E, the rest."""
    if longitude < 105:
        return "Asia/Jakarta"
    if longitude < 120:
        return "Asia/Makassar"
    return "Asia/Jayapura"


def longitude_bucket_offset(longitude: float) -> float:
    return ZONE_OFFSETS[longitude_bucket_zone(longitude)]


def _zone_for_offset(offset: float) -> Optional[str]:
    for zone, zone_offset in ZONE_OFFSETS.items():
        if zone_offset == offset:
            return zone
    return None


def describe_offset(offset: float) -> str:
    """UTC+7 style label, with the Indonesian abbreviation when one applies."""
    label = f"UTC{offset:+g}"
    zone = _zone_for_offset(offset)
    if zone:
        return f"{ZONE_ABBREVIATIONS[zone]} ({label})"
    return label


def resolve_timezone_offset(strategy: str, longitude: float, requested: Optional[float] = None,
                            city_offset: Optional[float] = None, default_offset: float = 7.0) -> float:
    """
    Picks the UTC offset (hours east) a schedule is computed for.

    fixed: the requested offset, else the city's static offset, else the default.
    longitude_bucket: derived from longitude only; an explicit offset is refused
    because it would disagree with the bucket for some coordinates.
    """
    if strategy == FIXED_STRATEGY:
        if requested is not None:
            return float(requested)
        if city_offset is not None:
            return float(city_offset)
        return float(default_offset)

    if strategy == LONGITUDE_BUCKET_STRATEGY:
        if requested is not None:
            raise ValidationError("timezone cannot be supplied when offsets are derived from longitude")
        return longitude_bucket_offset(longitude)

    raise ValidationError(f"Unknown timezone strategy: {strategy!r}")


def coordinate_bucket(value: float, tolerance: float) -> int:
    """Grid cell index used as part of the cache conflict key."""
    return int(round(value / tolerance))
