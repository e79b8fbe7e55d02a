import os
from dotenv import load_dotenv

# Load .env file
dotenv_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), '.env')
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path)


def _env_bool(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'a_very_long_and_random_secret_key_for_sholat_project'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', "INFO")
    VERSION = "1.0.0"

    # Sentry Configuration
    SENTRY_DSN = os.environ.get('SENTRY_DSN')

    # Flask-Smorest API documentation
    API_TITLE = "Sholat API"
    API_VERSION = "v1"
    OPENAPI_VERSION = "3.0.2"
    OPENAPI_URL_PREFIX = "/api/docs"
    OPENAPI_SWAGGER_UI_PATH = "/swagger-ui"
    OPENAPI_SWAGGER_UI_URL = "https://cdn.jsdelivr.net/npm/swagger-ui-dist/"

    # Rate limiting (Flask-Limiter)
    RATELIMIT_DEFAULT = os.environ.get('RATELIMIT_DEFAULT', "200 per day;50 per hour")

    # Prayer time calculation
    PRAYER_ASR_FACTOR = float(os.environ.get('PRAYER_ASR_FACTOR', 1))
    PRAYER_FAJR_ANGLE = float(os.environ.get('PRAYER_FAJR_ANGLE', 18.0))
    PRAYER_ISHA_ANGLE = float(os.environ.get('PRAYER_ISHA_ANGLE', 18.0))
    # One of: none, angle_based, one_seventh, middle_of_the_night
    PRAYER_HIGH_LATITUDE_RULE = os.environ.get('PRAYER_HIGH_LATITUDE_RULE', 'angle_based')

    # 'fixed' uses explicit numeric offsets, 'longitude_bucket' derives WIB/WITA/WIT from longitude
    PRAYER_TIMEZONE_STRATEGY = os.environ.get('PRAYER_TIMEZONE_STRATEGY', 'fixed')
    PRAYER_DEFAULT_TIMEZONE_OFFSET = float(os.environ.get('PRAYER_DEFAULT_TIMEZONE_OFFSET', 7))
    PRAYER_DEFAULT_CITY = os.environ.get('PRAYER_DEFAULT_CITY', 'lhokseumawe')

    # Schedule cache
    PRAYER_CACHE_ENABLED = _env_bool('PRAYER_CACHE_ENABLED', True)
    PRAYER_CACHE_FRESHNESS_DAYS = int(os.environ.get('PRAYER_CACHE_FRESHNESS_DAYS', 7))
    PRAYER_CACHE_COORDINATE_TOLERANCE = float(os.environ.get('PRAYER_CACHE_COORDINATE_TOLERANCE', 0.01))
    PRAYER_PRECACHE_DAYS = int(os.environ.get('PRAYER_PRECACHE_DAYS', 30))


class DevelopmentConfig(Config):
    FLASK_ENV = 'development'
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///sholat_dev.db'
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    FLASK_ENV = 'production'
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL')


class TestingConfig(Config):
    TESTING = True
    # Use an in-memory SQLite database for tests to ensure speed and isolation.
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    RATELIMIT_ENABLED = False # Disable rate limiting for tests
    SECRET_KEY = 'test-secret-key'
    SENTRY_DSN = None
    PRAYER_TIMEZONE_STRATEGY = 'fixed'


config_by_name = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
