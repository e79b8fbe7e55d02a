#!/usr/bin/env python
# scripts/precache_cities.py

import argparse
import os
import sys

# This script is intended to be run from the command line.
# It needs access to the main Flask application context.
# We add the backend directory to the Python path to allow imports.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sholat import create_app, db
from sholat.services.geocoding_service import find_city, list_cities
from sholat.services.prayer_time_service import precache_city_schedules
from sholat.utils.time_utils import parse_date_str, utc_now


def main(argv=None):
    """
    Warms the schedule cache for gazetteer cities.

    Intended to run daily from a scheduler (e.g. a cron job) so that
    requests for listed cities are served from the cache. Rows older than
    the freshness window are simply overwritten.
    """
    parser = argparse.ArgumentParser(description="Precompute prayer schedules for gazetteer cities.")
    parser.add_argument('--days', type=int, default=None, help="Number of days to cache, starting today.")
    parser.add_argument('--start', type=parse_date_str, default=None, help="First date to cache (YYYY-MM-DD). Defaults to today (UTC).")
    parser.add_argument('--city', action='append', default=None, help="Limit to this city. Can be repeated.")
    args = parser.parse_args(argv)

    app = create_app(os.getenv('FLASK_CONFIG') or 'default')
    with app.app_context():
        db.create_all()

        days = args.days or app.config.get('PRAYER_PRECACHE_DAYS', 30)
        start = args.start or utc_now().date()

        cities = list_cities()
        if args.city:
            cities = []
            for name in args.city:
                city = find_city(name)
                if city is None:
                    app.logger.error(f"City '{name}' is not in the gazetteer.")
                    return 1
                cities.append(city)

        app.logger.info(f"--- Precaching {days} day(s) from {start} for {len(cities)} city(ies) ---")
        counts = precache_city_schedules(start, days, cities)
        app.logger.info(f"--- Done: {counts['cached']} cached, {counts['failed']} failed, {counts['undefined']} undefined ---")
        return 1 if counts['failed'] else 0


if __name__ == '__main__':
    sys.exit(main())
