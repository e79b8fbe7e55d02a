# sholat/models.py

from datetime import datetime
from .extensions import db


class PrayerTimesCache(db.Model):
    """
    One computed prayer schedule for a location and date.

    Rows are keyed by the coordinate rounded to the cache tolerance grid rather
    than the raw coordinate, so two requests a few metres apart land on the same
    row. The stored latitude/longitude are the exact values of the last write.
    Rows are overwritten on recompute and never deleted by the application.
    """
    __tablename__ = 'prayer_times_cache'

    __table_args__ = (
        db.UniqueConstraint('date', 'latitude_bucket', 'longitude_bucket', 'method_key',
                            name='uq_prayer_times_date_location_method'),
        db.Index('ix_prayer_times_lookup', 'date', 'method_key'),
    )

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    latitude_bucket = db.Column(db.Integer, nullable=False)
    longitude_bucket = db.Column(db.Integer, nullable=False)

    # e.g. '1-18-18-angle_based-+7', see CalculationParameters.method_key
    method_key = db.Column(db.String(64), nullable=False)
    asr_factor = db.Column(db.Float, nullable=False, default=1)
    fajr_angle = db.Column(db.Float, nullable=False, default=18.0)
    isha_angle = db.Column(db.Float, nullable=False, default=18.0)
    high_latitude_rule = db.Column(db.String(32), nullable=False, default='angle_based')
    timezone_offset = db.Column(db.Float, nullable=False, default=0.0)

    fajr = db.Column(db.Time, nullable=False)
    sunrise = db.Column(db.Time, nullable=False)
    dhuhr = db.Column(db.Time, nullable=False)
    asr = db.Column(db.Time, nullable=False)
    maghrib = db.Column(db.Time, nullable=False)
    isha = db.Column(db.Time, nullable=False)

    # Prayer names placed by the high latitude rule, e.g. ["fajr", "isha"]
    adjusted = db.Column(db.JSON, nullable=False, default=list)
    city = db.Column(db.String(100), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f'<PrayerTimesCache {self.date} ({self.latitude}, {self.longitude}) {self.method_key}>'
