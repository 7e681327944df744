import logging
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
import redis as _redis

from stager.services.rate_limiter import FixedWindowRateLimiter

logger = logging.getLogger(__name__)

db = SQLAlchemy()
migrate = Migrate()

# Initialized lazily in create_app
redis_client: _redis.Redis = None  # type: ignore
rate_limiter: FixedWindowRateLimiter = None  # type: ignore


def init_redis(app):
    global redis_client
    redis_url = app.config.get("REDIS_URL", "")
    if not redis_url:
        logger.warning("REDIS_URL not set — variant cache disabled (dev mode)")
        redis_client = None
        return

    try:
        redis_client = _redis.from_url(redis_url, decode_responses=True)
        redis_client.ping()
    except Exception as e:
        logger.warning("Redis connection failed (%s) — variant cache disabled", e)
        redis_client = None


def init_rate_limiter(app):
    global rate_limiter
    rate_limiter = FixedWindowRateLimiter(
        limit=app.config["RATE_LIMIT_MAX_REQUESTS"],
        window=app.config["RATE_LIMIT_WINDOW_SECONDS"],
        sweep_interval=app.config["RATE_LIMIT_SWEEP_SECONDS"],
    )
