# sholat/schemas.py

from marshmallow import Schema, fields, validate


class MessageSchema(Schema):
    message = fields.Str(required=True)


class LocationArgsSchema(Schema):
    """Query arguments that select a location and calculation settings."""
    city = fields.Str()
    latitude = fields.Float(validate=validate.Range(min=-90, max=90))
    longitude = fields.Float(validate=validate.Range(min=-180, max=180))
    # Hours east of UTC, e.g. 7 for WIB
    timezone = fields.Float(validate=validate.Range(min=-12, max=14))
    asr_factor = fields.Float(validate=validate.Range(min=0, min_inclusive=False))


class PrayerTimesArgsSchema(LocationArgsSchema):
    date = fields.Date(format="%Y-%m-%d")


class PrayerTimesSchema(Schema):
    date = fields.Str(required=True)
    city = fields.Str(required=True)
    latitude = fields.Float(required=True)
    longitude = fields.Float(required=True)
    timezone = fields.Str(required=True)
    timezone_offset = fields.Float(required=True)
    fajr = fields.Str(required=True)
    sunrise = fields.Str(required=True)
    dhuhr = fields.Str(required=True)
    asr = fields.Str(required=True)
    maghrib = fields.Str(required=True)
    isha = fields.Str(required=True)
    adjusted = fields.List(fields.Str(), required=True)
    cached = fields.Bool(required=True)


class CurrentPrayerSchema(Schema):
    current_prayer = fields.Str(required=True)
    next_prayer = fields.Str(required=True)
    time_until_next = fields.Str(required=True)
    remaining_seconds = fields.Int(required=True)
    prayer_times = fields.Nested(PrayerTimesSchema, required=True)


class CitySchema(Schema):
    key = fields.Str(dump_only=True)
    name = fields.Str(dump_only=True)
    province = fields.Str(dump_only=True)
    latitude = fields.Float(dump_only=True)
    longitude = fields.Float(dump_only=True)
    timezone = fields.Str(dump_only=True)
    utc_offset = fields.Float(dump_only=True)


class HealthSchema(Schema):
    status = fields.Str(required=True)
    time = fields.Str(required=True)
    database = fields.Str(required=True)
    version = fields.Str(required=True)
    cities_count = fields.Int(required=True)
