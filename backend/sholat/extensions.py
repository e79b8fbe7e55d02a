# sholat/extensions.py

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

db = SQLAlchemy()

# DB migrations
migrate = Migrate()

# Rate limiting, defaults come from RATELIMIT_DEFAULT
limiter = Limiter(key_func=get_remote_address)
