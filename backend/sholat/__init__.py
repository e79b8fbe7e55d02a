import sentry_sdk
from sentry_sdk.integrations.flask import FlaskIntegration

# Import extensions from the central extensions file
from .extensions import db, limiter
import logging
from flask import Flask
from flask_cors import CORS
from flask_smorest import Api

cors = CORS()
api = Api() # Initialize Flask-Smorest API


def create_app(config_name, schedule_cache=None):
    """
    Flask Application Factory function.

    `schedule_cache` replaces the SQL backed cache built from config, which
    lets tests inject an in-memory store.
    """
    app = Flask(__name__,
                instance_relative_config=False)

    # 1. Load Config
    from .config import config_by_name
    config_obj = config_by_name.get(config_name, config_by_name['default'])
    app.config.from_object(config_obj)

    # 2. Set up Logging
    log_level_str = app.config.get('LOG_LEVEL', 'INFO').upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    # app.logger is the 'sholat' logger, so module loggers under sholat.* propagate to it
    app.logger.setLevel(log_level)
    app.logger.info(f"App configured with: {config_obj.__name__}")

    # 3. Sentry SDK initialization - for error and performance tracking
    if app.config.get('SENTRY_DSN'):
        sentry_sdk.init(
            dsn=app.config['SENTRY_DSN'],
            integrations=[FlaskIntegration()],
            send_default_pii=False,
            traces_sample_rate=1.0
        )
        app.logger.info("Sentry initialized for error tracking.")

    # 4. Check SECRET_KEY and database
    if not app.config.get('SECRET_KEY'):
        app.logger.error("CRITICAL: SECRET_KEY is not set! Application will not run securely.")
    if not app.config.get('SQLALCHEMY_DATABASE_URI'):
        app.logger.error("CRITICAL: SQLALCHEMY_DATABASE_URI is not set! Set DATABASE_URL.")

    # 5. Initialize Extensions
    db.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": "*"}})
    limiter.init_app(app)
    api.init_app(app)

    # 6. Schedule cache, reachable from services through current_app.extensions
    from .services.prayer_time_service import build_schedule_cache
    app.extensions['schedule_cache'] = schedule_cache if schedule_cache is not None else build_schedule_cache(app.config)

    # 7. Register Blueprints
    with app.app_context():
        from . import models  # noqa: F401  (registers tables with SQLAlchemy metadata)
        from .routes.main_routes import main_bp
        from .routes.api_routes import api_bp

        api.register_blueprint(main_bp)
        api.register_blueprint(api_bp)

        app.logger.info(f"Application initialized with environment: {app.config.get('FLASK_ENV')}, Debug: {app.config.get('DEBUG')}")

    return app
