"""Immutable value types shared by the prayer time calculation, tracking and caching code."""

import datetime
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterator, Optional

from ...exceptions import ValidationError


class PrayerKind(Enum):
    FAJR = "fajr"
    SUNRISE = "sunrise"
    DHUHR = "dhuhr"
    ASR = "asr"
    MAGHRIB = "maghrib"
    ISHA = "isha"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def ordered(cls) -> Iterator["PrayerKind"]:
        """Yields the kinds in their fixed daily order, Fajr first."""
        return iter(_PRAYER_ORDER)


_PRAYER_ORDER = (
    PrayerKind.FAJR,
    PrayerKind.SUNRISE,
    PrayerKind.DHUHR,
    PrayerKind.ASR,
    PrayerKind.MAGHRIB,
    PrayerKind.ISHA,
)


class HighLatitudeRule(Enum):
    """How Fajr and Isha are placed when the twilight angle is never reached."""
    NONE = "none"
    MIDDLE_OF_THE_NIGHT = "middle_of_the_night"
    ONE_SEVENTH = "one_seventh"
    ANGLE_BASED = "angle_based"

    def night_portion(self, twilight_angle: float) -> Optional[float]:
        if self is HighLatitudeRule.MIDDLE_OF_THE_NIGHT:
            return 1 / 2.0
        if self is HighLatitudeRule.ONE_SEVENTH:
            return 1 / 7.0
        if self is HighLatitudeRule.ANGLE_BASED:
            return twilight_angle / 60.0
        return None


@dataclass(frozen=True)
class GeoCoordinate:
    latitude: float
    longitude: float

    def __post_init__(self):
        for name, value, limit in (("latitude", self.latitude, 90.0), ("longitude", self.longitude, 180.0)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value) or not -limit <= value <= limit:
                raise ValidationError(f"{name} must be within [-{limit:g}, {limit:g}], got {value}")
            object.__setattr__(self, name, float(value))

    def is_near(self, other: "GeoCoordinate", tolerance: float) -> bool:
        return (abs(self.latitude - other.latitude) < tolerance
                and abs(self.longitude - other.longitude) < tolerance)


@dataclass(frozen=True)
class SolarParameters:
    declination: float
    equation_of_time_minutes: float

    @property
    def equation_of_time_hours(self) -> float:
        return self.equation_of_time_minutes / 60.0


@dataclass(frozen=True)
class CalculationParameters:
    asr_factor: float = 1
    fajr_angle: float = 18.0
    isha_angle: float = 18.0
    high_latitude_rule: HighLatitudeRule = HighLatitudeRule.ANGLE_BASED
    timezone_offset: float = 0.0

    def __post_init__(self):
        if not self.asr_factor > 0:
            raise ValidationError(f"asr_factor must be positive, got {self.asr_factor}")
        for name in ("fajr_angle", "isha_angle"):
            angle = getattr(self, name)
            if not 0 < angle < 90:
                raise ValidationError(f"{name} must be between 0 and 90 degrees, got {angle}")
        if not -12 <= self.timezone_offset <= 14:
            raise ValidationError(f"timezone_offset must be within [-12, 14] hours, got {self.timezone_offset}")
        if not isinstance(self.high_latitude_rule, HighLatitudeRule):
            try:
                rule = HighLatitudeRule(self.high_latitude_rule)
            except ValueError:
                raise ValidationError(f"Unknown high latitude rule: {self.high_latitude_rule!r}") from None
            object.__setattr__(self, "high_latitude_rule", rule)

    @property
    def method_key(self) -> str:
        """Composite key separating schedules computed with different settings."""
        return (f"{self.asr_factor:g}-{self.fajr_angle:g}-{self.isha_angle:g}-"
                f"{self.high_latitude_rule.value}-{self.timezone_offset:+g}")


@dataclass(frozen=True)
class PrayerSchedule:
    date: datetime.date
    coordinate: GeoCoordinate
    fajr: datetime.time
    sunrise: datetime.time
    dhuhr: datetime.time
    asr: datetime.time
    maghrib: datetime.time
    isha: datetime.time
    parameters: CalculationParameters = field(default_factory=CalculationParameters)
    adjusted: FrozenSet[PrayerKind] = frozenset()

    def time_of(self, kind: PrayerKind) -> datetime.time:
        return getattr(self, kind.value)

    @property
    def is_degraded(self) -> bool:
        return bool(self.adjusted)

    def as_dict(self) -> Dict[str, str]:
        return {kind.value: self.time_of(kind).strftime("%H:%M") for kind in PrayerKind.ordered()}


@dataclass(frozen=True)
class PrayerStatus:
    current: PrayerKind
    next: PrayerKind
    remaining: datetime.timedelta


@dataclass(frozen=True)
class CacheEntry:
    schedule: PrayerSchedule
    created_at: datetime.datetime
    city: Optional[str] = None
