# backend/tests/test_schedule_builder.py

import datetime
import pytest

from sholat.exceptions import DomainError, ValidationError
from sholat.services.prayer_time.domain import (
    CalculationParameters,
    GeoCoordinate,
    HighLatitudeRule,
    PrayerKind,
)
from sholat.services.prayer_time.hour_angle import SUNRISE_DEPRESSION, hour_angle, local_time, solar_noon
from sholat.services.prayer_time.schedule_builder import build_schedule, compute_schedule, round_to_minute
from sholat.services.prayer_time.solar_ephemeris import solar_parameters

LHOKSEUMAWE = GeoCoordinate(5.1870, 97.1413)


def _minutes(schedule):
    return [t.hour * 60 + t.minute for t in (schedule.time_of(kind) for kind in PrayerKind.ordered())]


def _dates_2024():
    dates = [datetime.date(2024, month, 1) for month in range(1, 13)]
    dates += [datetime.date(2024, 3, 20), datetime.date(2024, 6, 21),
              datetime.date(2024, 9, 22), datetime.date(2024, 12, 21)]
    return dates


@pytest.mark.parametrize("date, expected", [
    (datetime.date(2024, 6, 21), {
        "fajr": "05:05", "sunrise": "06:21", "dhuhr": "12:33",
        "asr": "16:00", "maghrib": "18:46", "isha": "20:02",
    }),
    (datetime.date(2024, 1, 15), {
        "fajr": "05:31", "sunrise": "06:45", "dhuhr": "12:40",
        "asr": "16:03", "maghrib": "18:36", "isha": "19:50",
    }),
])
def test_lhokseumawe_reference_schedule(date, expected):
    """
    GIVEN Lhokseumawe, UTC+7 and the standard Asr factor
    WHEN the schedule is computed
    THEN the six instants match the reference values exactly.
    """
    schedule = compute_schedule(LHOKSEUMAWE, date, asr_factor=1, timezone_offset=7)

    assert schedule.as_dict() == expected
    assert schedule.adjusted == frozenset()
    assert not schedule.is_degraded


def test_compute_schedule_is_pure():
    date = datetime.date(2024, 6, 21)
    first = compute_schedule(LHOKSEUMAWE, date, asr_factor=1, timezone_offset=7)
    for _ in range(3):
        again = compute_schedule(LHOKSEUMAWE, date, asr_factor=1, timezone_offset=7)
        assert again == first
        assert repr(again.as_dict()) == repr(first.as_dict())


@pytest.mark.parametrize("latitude", range(-65, 66, 5))
def test_instants_are_ordered_up_to_65_degrees(latitude):
    coordinate = GeoCoordinate(latitude, 0.0)
    for date in _dates_2024():
        schedule = compute_schedule(coordinate, date, timezone_offset=0)
        minutes = _minutes(schedule)
        assert minutes == sorted(minutes), f"{date} at {latitude}: {schedule.as_dict()}"
        assert len(set(minutes)) == 6, f"{date} at {latitude}: {schedule.as_dict()}"


def test_asr_factor_two_is_later_and_still_ordered():
    date = datetime.date(2024, 6, 21)
    standard = compute_schedule(LHOKSEUMAWE, date, asr_factor=1, timezone_offset=7)
    alternative = compute_schedule(LHOKSEUMAWE, date, asr_factor=2, timezone_offset=7)

    assert alternative.asr > standard.asr
    assert alternative.as_dict()["asr"] == "17:01"
    assert _minutes(alternative) == sorted(_minutes(alternative))
    # Only Asr depends on the factor
    assert alternative.fajr == standard.fajr and alternative.isha == standard.isha


def test_polar_day_raises_domain_error():
    """
    GIVEN latitude 85 on the June solstice, where the sun never sets
    WHEN the schedule is computed
    THEN a DomainError naming the undefined prayer is raised instead of a time.
    """
    with pytest.raises(DomainError) as excinfo:
        compute_schedule(GeoCoordinate(85.0, 0.0), datetime.date(2024, 6, 21))

    error = excinfo.value
    assert error.prayer is PrayerKind.SUNRISE
    assert error.latitude == 85.0
    assert error.date == datetime.date(2024, 6, 21)
    assert "undefined at latitude 85.0" in str(error)


def test_polar_day_raises_under_every_rule():
    for rule in HighLatitudeRule:
        with pytest.raises(DomainError):
            compute_schedule(GeoCoordinate(85.0, 0.0), datetime.date(2024, 6, 21), high_latitude_rule=rule)


def test_white_night_uses_angle_based_portion_and_flags_it():
    """At 60N in June the sun never reaches 18 degrees below the horizon."""
    schedule = compute_schedule(GeoCoordinate(60.0, 0.0), datetime.date(2024, 6, 21))

    assert schedule.adjusted == frozenset({PrayerKind.FAJR, PrayerKind.ISHA})
    assert schedule.is_degraded
    assert schedule.as_dict()["fajr"] == "01:03"
    assert schedule.as_dict()["isha"] == "23:00"
    assert _minutes(schedule) == sorted(_minutes(schedule))


def test_white_night_without_rule_raises_for_fajr():
    with pytest.raises(DomainError) as excinfo:
        compute_schedule(GeoCoordinate(60.0, 0.0), datetime.date(2024, 6, 21), high_latitude_rule="none")
    assert excinfo.value.prayer is PrayerKind.FAJR


def test_defined_twilight_is_never_replaced():
    """
    GIVEN 48N in June, where the sun still reaches 18 degrees below the horizon
    WHEN the schedule is computed with the default high latitude rule
    THEN Fajr and Isha are the 18 degree times, exactly as with no rule at all.
    """
    date = datetime.date(2024, 6, 21)
    default = compute_schedule(GeoCoordinate(48.0, 0.0), date)
    without_rule = compute_schedule(GeoCoordinate(48.0, 0.0), date, high_latitude_rule="none")

    assert default.parameters.high_latitude_rule is HighLatitudeRule.ANGLE_BASED
    assert default.adjusted == frozenset()
    assert not default.is_degraded
    assert default.as_dict()["fajr"] == "00:42"
    assert default.as_dict()["isha"] == "23:22"
    assert default.as_dict() == without_rule.as_dict()



def test_long_twilight_is_kept_without_rule():
    schedule = compute_schedule(GeoCoordinate(48.0, 0.0), datetime.date(2024, 6, 21), high_latitude_rule="none")

    assert schedule.adjusted == frozenset()
    assert schedule.as_dict()["fajr"] == "00:42"
    assert schedule.as_dict()["isha"] == "23:22"


@pytest.mark.parametrize("rule", [HighLatitudeRule.ONE_SEVENTH, HighLatitudeRule.MIDDLE_OF_THE_NIGHT])
def test_other_night_portions_flag_adjusted_instants(rule):
    schedule = compute_schedule(GeoCoordinate(60.0, 0.0), datetime.date(2024, 6, 21), high_latitude_rule=rule)

    assert schedule.adjusted == frozenset({PrayerKind.FAJR, PrayerKind.ISHA})
    assert schedule.parameters.high_latitude_rule is rule
    assert schedule.fajr < schedule.sunrise


def test_build_schedule_defaults():
    schedule = build_schedule(GeoCoordinate(0.0, 0.0), datetime.date(2024, 3, 20))
    assert schedule.parameters == CalculationParameters()
    assert schedule.coordinate == GeoCoordinate(0.0, 0.0)
    assert schedule.date == datetime.date(2024, 3, 20)


@pytest.mark.parametrize("hour, expected", [
    (12.0 + 29 / 3600, datetime.time(12, 0)),
    (12.0 + 31 / 3600, datetime.time(12, 1)),
    (23.999, datetime.time(0, 0)),
    (-0.5, datetime.time(23, 30)),
    (24.25, datetime.time(0, 15)),
])
def test_round_to_minute(hour, expected):
    assert round_to_minute(hour) == expected


@pytest.mark.parametrize("latitude, longitude", [(91, 0), (-90.5, 0), (0, 181), (float("nan"), 0), ("5", 97)])
def test_invalid_coordinate_raises_validation_error(latitude, longitude):
    with pytest.raises(ValidationError):
        GeoCoordinate(latitude, longitude)


@pytest.mark.parametrize("kwargs", [
    {"asr_factor": 0},
    {"fajr_angle": 0},
    {"isha_angle": 95},
    {"timezone_offset": 15},
    {"high_latitude_rule": "bogus"},
])
def test_invalid_parameters_raise_validation_error(kwargs):
    with pytest.raises(ValidationError):
        CalculationParameters(**kwargs)


def test_method_key_separates_settings():
    assert CalculationParameters(timezone_offset=7).method_key == "1-18-18-angle_based-+7"
    assert CalculationParameters(asr_factor=2, timezone_offset=-3.5).method_key == "2-18-18-angle_based--3.5"
    assert CalculationParameters(high_latitude_rule="none").method_key == "1-18-18-none-+0"


def test_instants_follow_local_time_conversion():
    date = datetime.date(2024, 6, 21)
    solar = solar_parameters(date)
    clock = (LHOKSEUMAWE.longitude, solar.equation_of_time_minutes, 7.0)
    horizon = hour_angle(LHOKSEUMAWE.latitude, solar.declination, SUNRISE_DEPRESSION)
    fajr = hour_angle(LHOKSEUMAWE.latitude, solar.declination, 18.0)

    schedule = compute_schedule(LHOKSEUMAWE, date, timezone_offset=7)

    assert schedule.dhuhr == round_to_minute(solar_noon(*clock))
    assert schedule.sunrise == round_to_minute(local_time(horizon, *clock, morning=True))
    assert schedule.maghrib == round_to_minute(local_time(horizon, *clock, morning=False))
    assert schedule.fajr == round_to_minute(local_time(fajr, *clock, morning=True))
