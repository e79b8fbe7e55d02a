# This module turns a coordinate and a date into the six daily prayer instants.
import datetime
import logging
import math
from typing import Dict, Optional, Set

from ...exceptions import DomainError
from .domain import CalculationParameters, GeoCoordinate, PrayerKind, PrayerSchedule
from .hour_angle import SUNRISE_DEPRESSION, asr_depression_angle, hour_angle, local_time, solar_noon
from .solar_ephemeris import normalize_hour, solar_parameters

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60


def round_to_minute(hour: float) -> datetime.time:
    """Adds 30 seconds then truncates, so 05:12:30 becomes 05:13."""
    minutes = int(math.floor(normalize_hour(hour) * 60 + 0.5)) % MINUTES_PER_DAY
    return datetime.time(minutes // 60, minutes % 60)


def _solve(kind: PrayerKind, coordinate: GeoCoordinate, date: datetime.date,
           declination: float, depression: float) -> float:
    try:
        return hour_angle(coordinate.latitude, declination, depression)
    except DomainError as e:
        raise e.with_context(kind, coordinate.latitude, date) from e


def _twilight(kind: PrayerKind, angle: float, coordinate: GeoCoordinate, date: datetime.date,
              declination: float, horizon: float, night: float, rule,
              adjusted: Set[PrayerKind]) -> float:
    """
    Hours between solar noon and Fajr or Isha. `horizon` is the same distance
    for sunrise and maghrib. Only when the sun never reaches `angle` is the
    instant placed at the rule's portion of the night beyond the horizon.
    """
    try:
        return hour_angle(coordinate.latitude, declination, angle)
    except DomainError as e:
        portion = rule.night_portion(angle)
        if portion is None:
            raise e.with_context(kind, coordinate.latitude, date) from e

    adjusted.add(kind)
    logger.debug(f"{kind.display_name} placed at {portion:.3f} of the night for lat {coordinate.latitude} on {date}")
    return horizon + portion * night


def build_schedule(coordinate: GeoCoordinate, date: datetime.date,
                   parameters: Optional[CalculationParameters] = None) -> PrayerSchedule:
    """
    Computes the prayer schedule for one coordinate and date.

    Sunrise, Maghrib and Asr have no fallback: if the sun never crosses the
    required altitude a DomainError naming the prayer is raised. Fajr and Isha
    use their twilight angles; only where the sun never gets that low does
    `parameters.high_latitude_rule` place them, and those instants are listed
    in `PrayerSchedule.adjusted`.
    """
    parameters = parameters or CalculationParameters()
    solar = solar_parameters(date)
    declination = solar.declination
    latitude = coordinate.latitude
    clock = (coordinate.longitude, solar.equation_of_time_minutes, parameters.timezone_offset)

    horizon = _solve(PrayerKind.SUNRISE, coordinate, date, declination, SUNRISE_DEPRESSION)

    try:
        asr_angle = asr_depression_angle(parameters.asr_factor, latitude, declination)
    except DomainError as e:
        raise e.with_context(PrayerKind.ASR, latitude, date) from e
    asr = _solve(PrayerKind.ASR, coordinate, date, declination, asr_angle)

    night = 24.0 - 2 * horizon
    rule = parameters.high_latitude_rule
    adjusted: Set[PrayerKind] = set()
    fajr = _twilight(PrayerKind.FAJR, parameters.fajr_angle, coordinate, date, declination,
                     horizon, night, rule, adjusted)
    isha = _twilight(PrayerKind.ISHA, parameters.isha_angle, coordinate, date, declination,
                     horizon, night, rule, adjusted)

    hours: Dict[PrayerKind, float] = {
        PrayerKind.FAJR: local_time(fajr, *clock, morning=True),
        PrayerKind.SUNRISE: local_time(horizon, *clock, morning=True),
        PrayerKind.DHUHR: solar_noon(*clock),
        PrayerKind.ASR: local_time(asr, *clock, morning=False),
        PrayerKind.MAGHRIB: local_time(horizon, *clock, morning=False),
        PrayerKind.ISHA: local_time(isha, *clock, morning=False),
    }
    return PrayerSchedule(
        date=date,
        coordinate=coordinate,
        parameters=parameters,
        adjusted=frozenset(adjusted),
        **{kind.value: round_to_minute(hour) for kind, hour in hours.items()},
    )



def compute_schedule(coordinate: GeoCoordinate, date: datetime.date, asr_factor: float = 1,
                     timezone_offset: float = 0.0, **kwargs) -> PrayerSchedule:
    """Pure entry point: no cache, no application context required."""
    parameters = CalculationParameters(asr_factor=asr_factor, timezone_offset=timezone_offset, **kwargs)
    return build_schedule(coordinate, date, parameters)
