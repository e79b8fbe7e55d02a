# This module contains the schedule cache and the stores it can be backed by.
import datetime
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ...exceptions import CacheError
from ...metrics import CACHE_ERRORS, CACHE_HITS, CACHE_MISSES
from .domain import CacheEntry, CalculationParameters, GeoCoordinate, PrayerKind, PrayerSchedule
from .zone_resolver import coordinate_bucket

logger = logging.getLogger(__name__)

DEFAULT_FRESHNESS = datetime.timedelta(days=7)
DEFAULT_TOLERANCE = 0.01

BucketKey = Tuple[datetime.date, int, int, str]


def utcnow() -> datetime.datetime:
    return datetime.datetime.utcnow()


class ScheduleStore(ABC):
    """
    Persistence behind ScheduleCache. Stores only find and upsert; freshness
    and candidate selection are decided by the cache. Failures are raised as
    CacheError.
    """
    name = "abstract"

    @abstractmethod
    def find(self, coordinate: GeoCoordinate, date: datetime.date, method_key: Optional[str],
             tolerance: float) -> List[CacheEntry]:
        """
        Entries for `date` whose coordinate is strictly within `tolerance`,
        restricted to `method_key` unless it is None.
        """
        raise NotImplementedError

    @abstractmethod
    def upsert(self, entry: CacheEntry, key: BucketKey) -> None:
        """Inserts `entry`, or replaces the entry already stored under `key`."""
        raise NotImplementedError


class InMemoryScheduleStore(ScheduleStore):
    """Dictionary backed store for tests and deployments without a database."""
    name = "memory"

    def __init__(self):
        self._entries: Dict[BucketKey, CacheEntry] = {}
        self._lock = threading.Lock()

    def find(self, coordinate, date, method_key, tolerance):
        with self._lock:
            return [
                entry for key, entry in self._entries.items()
                if key[0] == date and method_key in (None, key[3])
                and entry.schedule.coordinate.is_near(coordinate, tolerance)
            ]

    def upsert(self, entry, key):
        with self._lock:
            self._entries[key] = entry

    def __len__(self):
        return len(self._entries)


class SQLAlchemyScheduleStore(ScheduleStore):
    """Stores schedules in the prayer_times_cache table."""
    name = "sql"

    def __init__(self, session_factory: Optional[Callable] = None):
        self._session_factory = session_factory

    @property
    def session(self):
        if self._session_factory is not None:
            return self._session_factory()
        from ...extensions import db
        return db.session

    def find(self, coordinate, date, method_key, tolerance):
        from ...models import PrayerTimesCache
        session = self.session
        try:
            query = session.query(PrayerTimesCache).filter(
                PrayerTimesCache.date == date,
                func.abs(PrayerTimesCache.latitude - coordinate.latitude) < tolerance,
                func.abs(PrayerTimesCache.longitude - coordinate.longitude) < tolerance,
            )
            if method_key is not None:
                query = query.filter(PrayerTimesCache.method_key == method_key)
            rows = query.all()
        except SQLAlchemyError as e:
            session.rollback()
            raise CacheError(f"Cache lookup failed for {date} at ({coordinate.latitude}, {coordinate.longitude}): {e}") from e
        return [self._to_entry(row) for row in rows]

    def upsert(self, entry, key):
        session = self.session
        try:
            self._write(session, entry, key)
            session.commit()
        except IntegrityError:
            # Another writer inserted the same key first; last write wins.
            session.rollback()
            try:
                self._write(session, entry, key)
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise CacheError(f"Cache upsert retry failed for {key}: {e}") from e
        except SQLAlchemyError as e:
            session.rollback()
            raise CacheError(f"Cache upsert failed for {key}: {e}") from e

    @staticmethod
    def _write(session, entry: CacheEntry, key: BucketKey) -> None:
        from ...models import PrayerTimesCache
        date, latitude_bucket, longitude_bucket, method_key = key
        row = session.query(PrayerTimesCache).filter_by(
            date=date,
            latitude_bucket=latitude_bucket,
            longitude_bucket=longitude_bucket,
            method_key=method_key,
        ).first()
        if row is None:
            row = PrayerTimesCache(
                date=date,
                latitude_bucket=latitude_bucket,
                longitude_bucket=longitude_bucket,
                method_key=method_key,
            )
            session.add(row)

        schedule = entry.schedule
        parameters = schedule.parameters
        row.latitude = schedule.coordinate.latitude
        row.longitude = schedule.coordinate.longitude
        row.asr_factor = parameters.asr_factor
        row.fajr_angle = parameters.fajr_angle
        row.isha_angle = parameters.isha_angle
        row.high_latitude_rule = parameters.high_latitude_rule.value
        row.timezone_offset = parameters.timezone_offset
        for kind in PrayerKind.ordered():
            setattr(row, kind.value, schedule.time_of(kind))
        row.adjusted = sorted(kind.value for kind in schedule.adjusted)
        row.city = entry.city
        row.created_at = entry.created_at
        session.flush()

    @staticmethod
    def _to_entry(row) -> CacheEntry:
        parameters = CalculationParameters(
            asr_factor=row.asr_factor,
            fajr_angle=row.fajr_angle,
            isha_angle=row.isha_angle,
            high_latitude_rule=row.high_latitude_rule,
            timezone_offset=row.timezone_offset,
        )
        schedule = PrayerSchedule(
            date=row.date,
            coordinate=GeoCoordinate(row.latitude, row.longitude),
            parameters=parameters,
            adjusted=frozenset(PrayerKind(value) for value in (row.adjusted or [])),
            **{kind.value: getattr(row, kind.value) for kind in PrayerKind.ordered()},
        )
        return CacheEntry(schedule=schedule, created_at=row.created_at, city=row.city)


class ScheduleCache:
    """
    Read-through/write-through cache of computed schedules.

    A lookup matches entries for the same date whose coordinate lies strictly
    within `tolerance` degrees on both axes and, when `parameters` are given,
    whose calculation settings match. Entries older than `freshness` are
    ignored and the newest remaining one is returned.
    Store failures never reach the caller: a failed lookup is a miss and a
    failed write returns False.
    """

    def __init__(self, store: ScheduleStore, freshness: datetime.timedelta = DEFAULT_FRESHNESS,
                 tolerance: float = DEFAULT_TOLERANCE, clock: Callable[[], datetime.datetime] = utcnow):
        if tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {tolerance}")
        self.store = store
        self.freshness = freshness
        self.tolerance = tolerance
        self.clock = clock

    def bucket_key(self, schedule: PrayerSchedule) -> BucketKey:
        return (
            schedule.date,
            coordinate_bucket(schedule.coordinate.latitude, self.tolerance),
            coordinate_bucket(schedule.coordinate.longitude, self.tolerance),
            schedule.parameters.method_key,
        )

    def get_entry(self, coordinate: GeoCoordinate, date: datetime.date,
                  parameters: Optional[CalculationParameters] = None) -> Optional[CacheEntry]:
        method_key = parameters.method_key if parameters is not None else None
        try:
            candidates = self.store.find(coordinate, date, method_key, self.tolerance)
        except CacheError as e:
            CACHE_ERRORS.labels(store=self.store.name, operation='get').inc()
            CACHE_MISSES.labels(store=self.store.name, reason='error').inc()
            logger.error(f"Schedule cache lookup failed, treating as miss: {e}")
            return None

        now = self.clock()
        fresh = [entry for entry in candidates if now - entry.created_at < self.freshness]
        if not fresh:
            reason = 'stale' if candidates else 'absent'
            CACHE_MISSES.labels(store=self.store.name, reason=reason).inc()
            logger.debug(f"Schedule cache MISS ({reason}) for {date} at ({coordinate.latitude}, {coordinate.longitude}).")
            return None

        CACHE_HITS.labels(store=self.store.name).inc()
        logger.debug(f"Schedule cache HIT for {date} at ({coordinate.latitude}, {coordinate.longitude}).")
        return max(fresh, key=lambda entry: entry.created_at)

    def get(self, coordinate: GeoCoordinate, date: datetime.date,
            parameters: Optional[CalculationParameters] = None) -> Optional[PrayerSchedule]:
        entry = self.get_entry(coordinate, date, parameters)
        return entry.schedule if entry else None

    def put(self, schedule: PrayerSchedule, city: Optional[str] = None) -> bool:
        entry = CacheEntry(schedule=schedule, created_at=self.clock(), city=city)
        try:
            self.store.upsert(entry, self.bucket_key(schedule))
        except CacheError as e:
            CACHE_ERRORS.labels(store=self.store.name, operation='put').inc()
            logger.error(f"Schedule cache write failed for {schedule.date}: {e}")
            return False
        return True
