# backend/tests/conftest.py

import datetime
import pytest

from sholat import create_app, db as _db
from sholat.services.prayer_time.cache_layer import InMemoryScheduleStore, ScheduleCache
from sholat.services.prayer_time.domain import CalculationParameters, GeoCoordinate, PrayerSchedule

LHOKSEUMAWE = GeoCoordinate(5.1870, 97.1413)


@pytest.fixture(scope='session')
def app():
    """Session-wide application for testing."""
    app = create_app('testing')
    return app


@pytest.fixture(scope='function')
def db(app):
    """Function-level database setup. Creates and tears down tables for each test function."""
    with app.app_context():
        _db.create_all()

        yield _db

        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def test_client(app, db):
    """A test client for the app, ensuring the DB is initialized."""
    return app.test_client()


@pytest.fixture
def app_config(app):
    """Allows a test to change app.config; the original values are restored afterwards."""
    original = dict(app.config)
    yield app.config
    app.config.clear()
    app.config.update(original)


class FakeClock:
    """Naive UTC clock that only moves when told to."""

    def __init__(self, start=datetime.datetime(2024, 6, 21, 0, 0, 0)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += datetime.timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def schedule_cache(clock):
    """ScheduleCache over an in-memory store with a controllable clock."""
    return ScheduleCache(store=InMemoryScheduleStore(), clock=clock)


def make_schedule(coordinate=LHOKSEUMAWE, date=datetime.date(2024, 6, 21), parameters=None,
                  times=("05:05", "06:21", "12:33", "16:00", "18:46", "20:02"), adjusted=frozenset()):
    """Builds a schedule from literal HH:MM strings, without any astronomy."""
    fajr, sunrise, dhuhr, asr, maghrib, isha = (
        datetime.datetime.strptime(value, "%H:%M").time() for value in times
    )
    return PrayerSchedule(
        date=date,
        coordinate=coordinate,
        fajr=fajr,
        sunrise=sunrise,
        dhuhr=dhuhr,
        asr=asr,
        maghrib=maghrib,
        isha=isha,
        parameters=parameters or CalculationParameters(timezone_offset=7),
        adjusted=adjusted,
    )


@pytest.fixture(name='make_schedule')
def make_schedule_fixture():
    return make_schedule
