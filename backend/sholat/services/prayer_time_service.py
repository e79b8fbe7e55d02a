from typing import Dict, Iterable, Optional, Tuple
from dataclasses import dataclass
import datetime
from flask import current_app

from ..exceptions import CityNotFoundError, DomainError, ValidationError
from ..metrics import SCHEDULE_COMPUTATIONS_TOTAL, SCHEDULE_COMPUTATION_DURATION_SECONDS
from ..utils.time_utils import local_now
from .geocoding_service import City, find_city, get_city, list_cities
from .prayer_time.cache_layer import SQLAlchemyScheduleStore, ScheduleCache
from .prayer_time.domain import CalculationParameters, GeoCoordinate, PrayerSchedule, PrayerStatus
from .prayer_time.schedule_builder import build_schedule, compute_schedule
from .prayer_time.timing_calculator import classify_current_prayer
from .prayer_time.zone_resolver import resolve_timezone_offset

__all__ = [
    "ResolvedLocation",
    "build_schedule_cache",
    "cache_get",
    "cache_put",
    "classify_current",
    "compute_schedule",
    "get_current_prayer_from_service",
    "get_prayer_times_for_date_from_service",
    "get_schedule_cache",
    "parameters_from_config",
    "precache_city_schedules",
    "resolve_location",
]

CUSTOM_LOCATION_NAME = "Custom Location"


@dataclass(frozen=True)
class ResolvedLocation:
    coordinate: GeoCoordinate
    name: str
    timezone_offset: float
    city: Optional[City] = None


# --- Pure entry points ---

def classify_current(schedule: PrayerSchedule, now_time: datetime.time) -> PrayerStatus:
    return classify_current_prayer(schedule, now_time)


def cache_get(cache: ScheduleCache, coordinate: GeoCoordinate, date: datetime.date,
              parameters: Optional[CalculationParameters] = None) -> Optional[PrayerSchedule]:
    return cache.get(coordinate, date, parameters)


def cache_put(cache: ScheduleCache, schedule: PrayerSchedule, city: Optional[str] = None) -> bool:
    return cache.put(schedule, city=city)


# --- Application wiring ---

def build_schedule_cache(config) -> Optional[ScheduleCache]:
    """Creates the SQL backed cache from app config, or None when caching is disabled."""
    if not config.get('PRAYER_CACHE_ENABLED', True):
        return None
    return ScheduleCache(
        store=SQLAlchemyScheduleStore(),
        freshness=datetime.timedelta(days=config.get('PRAYER_CACHE_FRESHNESS_DAYS', 7)),
        tolerance=config.get('PRAYER_CACHE_COORDINATE_TOLERANCE', 0.01),
    )


def get_schedule_cache() -> Optional[ScheduleCache]:
    return current_app.extensions.get('schedule_cache')


def parameters_from_config(timezone_offset: float, asr_factor: Optional[float] = None) -> CalculationParameters:
    config = current_app.config
    return CalculationParameters(
        asr_factor=asr_factor if asr_factor is not None else config.get('PRAYER_ASR_FACTOR', 1),
        fajr_angle=config.get('PRAYER_FAJR_ANGLE', 18.0),
        isha_angle=config.get('PRAYER_ISHA_ANGLE', 18.0),
        high_latitude_rule=config.get('PRAYER_HIGH_LATITUDE_RULE', 'angle_based'),
        timezone_offset=timezone_offset,
    )


def resolve_location(city: Optional[str] = None, latitude: Optional[float] = None,
                     longitude: Optional[float] = None, timezone: Optional[float] = None) -> ResolvedLocation:
    """
    Coordinates win over a city name; with neither, the configured default city
    is used. The UTC offset follows PRAYER_TIMEZONE_STRATEGY.
    """
    config = current_app.config
    if (latitude is None) != (longitude is None):
        raise ValidationError("latitude and longitude must be supplied together")

    matched_city = None
    if latitude is not None:
        coordinate = GeoCoordinate(latitude, longitude)
        name = CUSTOM_LOCATION_NAME
    else:
        if city:
            matched_city = find_city(city)
            if matched_city is None:
                raise CityNotFoundError(f"city not found: {city}")
        else:
            default_key = config.get('PRAYER_DEFAULT_CITY', 'lhokseumawe')
            matched_city = get_city(default_key) or find_city(default_key)
            if matched_city is None:
                raise CityNotFoundError(f"default city is not in the gazetteer: {default_key}")
        coordinate = matched_city.coordinate
        name = matched_city.name

    offset = resolve_timezone_offset(
        config.get('PRAYER_TIMEZONE_STRATEGY', 'fixed'),
        coordinate.longitude,
        requested=timezone,
        city_offset=matched_city.utc_offset if matched_city else None,
        default_offset=config.get('PRAYER_DEFAULT_TIMEZONE_OFFSET', 7.0),
    )
    return ResolvedLocation(coordinate=coordinate, name=name, timezone_offset=offset, city=matched_city)


def _compute_with_metrics(coordinate: GeoCoordinate, date_obj: datetime.date,
                          parameters: CalculationParameters) -> PrayerSchedule:
    with SCHEDULE_COMPUTATION_DURATION_SECONDS.time():
        try:
            schedule = build_schedule(coordinate, date_obj, parameters)
        except DomainError:
            SCHEDULE_COMPUTATIONS_TOTAL.labels(outcome='undefined').inc()
            raise
    SCHEDULE_COMPUTATIONS_TOTAL.labels(outcome='degraded' if schedule.is_degraded else 'ok').inc()
    return schedule


# --- Main Service Functions ---

def get_prayer_times_for_date_from_service(location: ResolvedLocation, date_obj: datetime.date,
                                           asr_factor: Optional[float] = None) -> Tuple[PrayerSchedule, bool]:
    """
    Read-through lookup: the cache first, then a fresh computation that is
    written back. Returns the schedule and whether it came from the cache.
    DomainError propagates; cache failures do not.
    """
    parameters = parameters_from_config(location.timezone_offset, asr_factor)
    cache = get_schedule_cache()

    if cache is not None:
        cached = cache.get(location.coordinate, date_obj, parameters)
        if cached is not None:
            current_app.logger.info(f"Schedule cache HIT for '{location.name}' on {date_obj}.")
            return cached, True

    schedule = _compute_with_metrics(location.coordinate, date_obj, parameters)
    if schedule.is_degraded:
        adjusted = ", ".join(sorted(kind.display_name for kind in schedule.adjusted))
        current_app.logger.warning(
            f"High latitude rule '{parameters.high_latitude_rule.value}' placed {adjusted} for '{location.name}' on {date_obj}."
        )

    if cache is not None and not cache.put(schedule, city=location.name):
        current_app.logger.warning(f"Could not cache schedule for '{location.name}' on {date_obj}.")
    return schedule, False


def get_current_prayer_from_service(location: ResolvedLocation, asr_factor: Optional[float] = None,
                                    now_utc: Optional[datetime.datetime] = None) -> Tuple[PrayerStatus, PrayerSchedule]:
    """Classifies the current prayer using the wall clock at the location's offset."""
    now = local_now(location.timezone_offset, now_utc)
    schedule, _ = get_prayer_times_for_date_from_service(location, now.date(), asr_factor)
    status = classify_current(schedule, now.time())
    current_app.logger.debug(f"Current prayer for '{location.name}' at {now:%H:%M}: {status.current.value} -> {status.next.value}")
    return status, schedule


def precache_city_schedules(start_date: datetime.date, days: int,
                            cities: Optional[Iterable[City]] = None) -> Dict[str, int]:
    """
    Computes and stores schedules for every gazetteer city over `days` days.
    Offsets are resolved the same way a request for the city would resolve
    them, so the stored method keys match later lookups. Returns counts of
    cached, failed and undefined schedules.
    """
    counts = {"cached": 0, "failed": 0, "undefined": 0}
    cache = get_schedule_cache()
    if cache is None:
        current_app.logger.warning("Schedule cache is disabled; nothing to precache.")
        return counts

    for city in cities if cities is not None else list_cities():
        location = resolve_location(city=city.key)
        parameters = parameters_from_config(location.timezone_offset)
        for day in range(days):
            date_obj = start_date + datetime.timedelta(days=day)
            try:
                schedule = _compute_with_metrics(city.coordinate, date_obj, parameters)
            except DomainError as e:
                current_app.logger.error(f"Skipping {city.name} on {date_obj}: {e}")
                counts["undefined"] += 1
                continue
            if cache.put(schedule, city=city.name):
                counts["cached"] += 1
            else:
                counts["failed"] += 1
        current_app.logger.info(f"Precached {days} day(s) for {city.name}.")
    return counts
