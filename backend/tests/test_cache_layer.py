# backend/tests/test_cache_layer.py

import datetime
import pytest
from freezegun import freeze_time
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from sholat.exceptions import CacheError
from sholat.models import PrayerTimesCache
from sholat.services.prayer_time.cache_layer import (
    InMemoryScheduleStore,
    SQLAlchemyScheduleStore,
    ScheduleCache,
    ScheduleStore,
)
from sholat.services.prayer_time.domain import CalculationParameters, GeoCoordinate, PrayerKind

DATE = datetime.date(2024, 6, 21)
PARAMS = CalculationParameters(timezone_offset=7)


class FailingStore(ScheduleStore):
    name = "failing"

    def find(self, coordinate, date, method_key, tolerance):
        raise CacheError("store unavailable")

    def upsert(self, entry, key):
        raise CacheError("store unavailable")


def test_round_trip(schedule_cache, make_schedule):
    schedule = make_schedule()

    assert schedule_cache.put(schedule) is True
    assert schedule_cache.get(schedule.coordinate, DATE, PARAMS) == schedule


def test_get_matches_within_tolerance(schedule_cache, make_schedule):
    schedule = make_schedule(coordinate=GeoCoordinate(5.0, 97.0))
    schedule_cache.put(schedule)

    assert schedule_cache.get(GeoCoordinate(5.005, 96.995), DATE, PARAMS) == schedule
    assert schedule_cache.get(GeoCoordinate(5.02, 97.0), DATE, PARAMS) is None
    assert schedule_cache.get(GeoCoordinate(5.0, 97.0), DATE + datetime.timedelta(days=1), PARAMS) is None


def test_tolerance_boundary_is_exclusive(clock, make_schedule):
    cache = ScheduleCache(store=InMemoryScheduleStore(), tolerance=0.25, clock=clock)
    cache.put(make_schedule(coordinate=GeoCoordinate(5.0, 97.0)))

    assert cache.get(GeoCoordinate(5.25, 97.0), DATE, PARAMS) is None
    assert cache.get(GeoCoordinate(5.125, 97.0), DATE, PARAMS) is not None


def test_different_settings_do_not_share_entries(schedule_cache, make_schedule):
    schedule_cache.put(make_schedule())

    assert schedule_cache.get(make_schedule().coordinate, DATE, CalculationParameters(timezone_offset=8)) is None
    assert schedule_cache.get(make_schedule().coordinate, DATE, CalculationParameters(asr_factor=2, timezone_offset=7)) is None


def test_stale_entry_is_a_miss_and_gets_overwritten(schedule_cache, clock, make_schedule):
    schedule = make_schedule()
    schedule_cache.put(schedule)

    clock.advance(days=7, seconds=-1)
    assert schedule_cache.get(schedule.coordinate, DATE, PARAMS) == schedule

    clock.advance(seconds=1)
    assert schedule_cache.get(schedule.coordinate, DATE, PARAMS) is None
    # Ignored, not deleted
    assert len(schedule_cache.store) == 1

    schedule_cache.put(schedule)
    assert schedule_cache.get(schedule.coordinate, DATE, PARAMS) == schedule
    assert len(schedule_cache.store) == 1


def test_staleness_with_wall_clock(make_schedule):
    cache = ScheduleCache(store=InMemoryScheduleStore())
    schedule = make_schedule()

    with freeze_time("2024-06-01 08:00:00") as frozen:
        cache.put(schedule)
        frozen.move_to("2024-06-07 08:00:00")
        assert cache.get(schedule.coordinate, DATE, PARAMS) == schedule
        frozen.move_to("2024-06-08 08:00:01")
        assert cache.get(schedule.coordinate, DATE, PARAMS) is None


def test_newest_candidate_wins(schedule_cache, clock, make_schedule):
    older = make_schedule(coordinate=GeoCoordinate(5.004, 97.0), times=("05:00", "06:21", "12:33", "16:00", "18:46", "20:02"))
    newer = make_schedule(coordinate=GeoCoordinate(5.006, 97.0), times=("05:06", "06:21", "12:33", "16:00", "18:46", "20:02"))
    schedule_cache.put(older)
    clock.advance(hours=1)
    schedule_cache.put(newer)

    assert len(schedule_cache.store) == 2
    assert schedule_cache.get(GeoCoordinate(5.005, 97.0), DATE, PARAMS) == newer


def test_get_without_parameters_matches_any_settings(schedule_cache, clock, make_schedule):
    """
    GIVEN schedules stored for one place under two calculation settings
    WHEN the cache is read without parameters
    THEN the newest fresh entry is returned whatever its settings.
    """
    standard = make_schedule()
    schedule_cache.put(standard)
    assert schedule_cache.get(GeoCoordinate(5.1905, 97.1413), DATE) == standard

    alternative = make_schedule(
        parameters=CalculationParameters(asr_factor=2, timezone_offset=7),
        times=("05:05", "06:21", "12:33", "17:01", "18:46", "20:02"),
    )
    clock.advance(minutes=1)
    schedule_cache.put(alternative)

    assert len(schedule_cache.store) == 2
    assert schedule_cache.get(GeoCoordinate(5.1905, 97.1413), DATE) == alternative
    assert schedule_cache.get(GeoCoordinate(5.1905, 97.1413), DATE, PARAMS) == standard
    assert schedule_cache.get(GeoCoordinate(5.1905, 97.1413), DATE + datetime.timedelta(days=1)) is None



def test_put_in_same_bucket_overwrites(schedule_cache, clock, make_schedule):
    first = make_schedule(times=("05:00", "06:21", "12:33", "16:00", "18:46", "20:02"))
    second = make_schedule()
    schedule_cache.put(first)
    clock.advance(minutes=5)
    schedule_cache.put(second)

    assert len(schedule_cache.store) == 1
    entry = schedule_cache.get_entry(second.coordinate, DATE, PARAMS)
    assert entry.schedule == second
    assert entry.created_at == clock.now


def test_store_failures_never_reach_the_caller(clock, make_schedule):
    cache = ScheduleCache(store=FailingStore(), clock=clock)
    schedule = make_schedule()

    assert cache.put(schedule) is False
    assert cache.get(schedule.coordinate, DATE, PARAMS) is None


def test_tolerance_must_be_positive():
    with pytest.raises(ValueError):
        ScheduleCache(store=InMemoryScheduleStore(), tolerance=0)


# --- SQL store ---

def test_sql_store_round_trip(app, db, clock, make_schedule):
    cache = ScheduleCache(store=SQLAlchemyScheduleStore(), clock=clock)
    schedule = make_schedule(adjusted=frozenset({PrayerKind.FAJR, PrayerKind.ISHA}))

    assert cache.put(schedule, city="Lhokseumawe") is True

    entry = cache.get_entry(schedule.coordinate, DATE, PARAMS)
    assert entry.schedule == schedule
    assert entry.city == "Lhokseumawe"
    assert entry.created_at == clock.now
    assert cache.get(schedule.coordinate, DATE) == schedule
    assert cache.get(schedule.coordinate, DATE, CalculationParameters(timezone_offset=8)) is None

    row = PrayerTimesCache.query.one()
    assert row.method_key == "1-18-18-angle_based-+7"
    assert row.adjusted == ["fajr", "isha"]
    assert row.latitude_bucket == 519


def test_sql_store_upsert_keeps_one_row(app, db, clock, make_schedule):
    cache = ScheduleCache(store=SQLAlchemyScheduleStore(), clock=clock)
    cache.put(make_schedule(times=("05:00", "06:21", "12:33", "16:00", "18:46", "20:02")))
    clock.advance(days=8)
    cache.put(make_schedule(coordinate=GeoCoordinate(5.1871, 97.1412)))

    assert PrayerTimesCache.query.count() == 1
    row = PrayerTimesCache.query.one()
    assert row.fajr == datetime.time(5, 5)
    assert row.latitude == 5.1871
    assert row.created_at == clock.now


def test_sql_store_stale_rows_are_ignored(app, db, clock, make_schedule):
    cache = ScheduleCache(store=SQLAlchemyScheduleStore(), clock=clock)
    schedule = make_schedule()
    cache.put(schedule)
    clock.advance(days=7)

    assert cache.get(schedule.coordinate, DATE, PARAMS) is None
    assert PrayerTimesCache.query.count() == 1


def test_sql_store_retries_after_concurrent_insert(app, db, mocker, make_schedule):
    """
    GIVEN another writer inserts the same key between our lookup and our insert
    WHEN the unique constraint rejects the insert
    THEN the session is rolled back and the write is applied once more.
    """
    write = mocker.patch.object(
        SQLAlchemyScheduleStore, '_write',
        side_effect=[IntegrityError("INSERT", {}, Exception("duplicate key")), None],
    )
    cache = ScheduleCache(store=SQLAlchemyScheduleStore())

    assert cache.put(make_schedule()) is True
    assert write.call_count == 2


def test_sql_store_errors_become_cache_errors(mocker, make_schedule):
    session = mocker.Mock()
    session.query.side_effect = SQLAlchemyError("database is down")
    store = SQLAlchemyScheduleStore(session_factory=lambda: session)
    schedule = make_schedule()

    with pytest.raises(CacheError):
        store.find(schedule.coordinate, DATE, PARAMS.method_key, 0.01)
    session.rollback.assert_called()

    cache = ScheduleCache(store=store)
    assert cache.get(schedule.coordinate, DATE, PARAMS) is None
    assert cache.put(schedule) is False
