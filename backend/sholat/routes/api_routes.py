# sholat/routes/api_routes.py
from flask import current_app
from flask_smorest import Blueprint, abort
from prometheus_client import generate_latest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from typing import Dict, Any

from ..extensions import db
from ..exceptions import CityNotFoundError, DomainError, ValidationError
from ..schemas import CitySchema, CurrentPrayerSchema, HealthSchema, LocationArgsSchema, MessageSchema, PrayerTimesArgsSchema, PrayerTimesSchema
from ..services.geocoding_service import list_cities
from ..services.prayer_time.domain import PrayerSchedule
from ..services.prayer_time.timing_calculator import format_duration
from ..services.prayer_time.zone_resolver import describe_offset
from ..services.prayer_time_service import (
    ResolvedLocation,
    get_current_prayer_from_service,
    get_prayer_times_for_date_from_service,
    resolve_location,
)
from ..utils.time_utils import local_today, utc_now

api_bp = Blueprint('API', __name__, url_prefix='/api')


@api_bp.route('/metrics')
def metrics():
    return generate_latest(), 200, {'Content-Type': 'text/plain; version=0.0.4; charset=utf-8'}


def _resolve_or_abort(args: Dict[str, Any]) -> ResolvedLocation:
    try:
        return resolve_location(
            city=args.get('city'),
            latitude=args.get('latitude'),
            longitude=args.get('longitude'),
            timezone=args.get('timezone'),
        )
    except CityNotFoundError as e:
        abort(404, message=str(e))
    except ValidationError as e:
        abort(400, message=str(e))


def _schedule_payload(schedule: PrayerSchedule, location: ResolvedLocation, cached: bool) -> Dict[str, Any]:
    payload = {
        "date": schedule.date.isoformat(),
        "city": location.name,
        "latitude": location.coordinate.latitude,
        "longitude": location.coordinate.longitude,
        "timezone": describe_offset(location.timezone_offset),
        "timezone_offset": location.timezone_offset,
        "adjusted": sorted(kind.value for kind in schedule.adjusted),
        "cached": cached,
    }
    payload.update(schedule.as_dict())
    return payload


@api_bp.route('/prayer-times')
@api_bp.arguments(PrayerTimesArgsSchema, location='query')
@api_bp.response(200, PrayerTimesSchema)
@api_bp.alt_response(400, schema=MessageSchema, description="Invalid location or parameters.")
@api_bp.alt_response(404, schema=MessageSchema, description="City not found.")
@api_bp.alt_response(422, schema=MessageSchema, description="A prayer time is undefined at this latitude and date.")
def prayer_times(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Prayer times for one day.
    Coordinates take precedence over `city`; with neither, the default city is used.
    The date defaults to today at the location's UTC offset.
    """
    location = _resolve_or_abort(args)
    date_obj = args.get('date') or local_today(location.timezone_offset)

    try:
        schedule, cached = get_prayer_times_for_date_from_service(location, date_obj, args.get('asr_factor'))
    except DomainError as e:
        current_app.logger.warning(f"Undefined prayer time for '{location.name}': {e}")
        abort(422, message=str(e))
    except ValidationError as e:
        abort(400, message=str(e))

    return _schedule_payload(schedule, location, cached)


@api_bp.route('/prayer-times/current')
@api_bp.arguments(LocationArgsSchema, location='query')
@api_bp.response(200, CurrentPrayerSchema)
@api_bp.alt_response(400, schema=MessageSchema, description="Invalid location or parameters.")
@api_bp.alt_response(404, schema=MessageSchema, description="City not found.")
@api_bp.alt_response(422, schema=MessageSchema, description="A prayer time is undefined at this latitude and date.")
def current_prayer(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    The current prayer window and the time left until the next one.
    """
    location = _resolve_or_abort(args)

    try:
        status, schedule = get_current_prayer_from_service(location, args.get('asr_factor'))
    except DomainError as e:
        current_app.logger.warning(f"Undefined prayer time for '{location.name}': {e}")
        abort(422, message=str(e))
    except ValidationError as e:
        abort(400, message=str(e))

    return {
        "current_prayer": status.current.display_name,
        "next_prayer": status.next.display_name,
        "time_until_next": format_duration(status.remaining),
        "remaining_seconds": int(status.remaining.total_seconds()),
        "prayer_times": _schedule_payload(schedule, location, cached=False),
    }


@api_bp.route('/cities')
@api_bp.response(200, CitySchema(many=True))
def cities():
    """Every city in the gazetteer, in table order."""
    return [city.to_dict() for city in list_cities()]


@api_bp.route('/health')
@api_bp.response(200, HealthSchema)
def health():
    database = "connected"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Health check could not reach the database: {e}")
        database = "disconnected"

    return {
        "status": "healthy",
        "time": utc_now().replace(microsecond=0).isoformat() + "Z",
        "database": database,
        "version": current_app.config.get('VERSION', 'unknown'),
        "cities_count": len(list_cities()),
    }
