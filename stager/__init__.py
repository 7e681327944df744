import logging
import math
import os
import time
from flask import Flask
from dotenv import load_dotenv
from werkzeug.exceptions import HTTPException

load_dotenv()

logger = logging.getLogger(__name__)


def create_app(config_name=None):
    flask_app = Flask(__name__)

    if config_name is None:
        config_name = os.environ.get("FLASK_ENV")
        if not config_name:
            # Default to production on managed platforms to avoid accidental
            # debug mode/weak defaults when env selection is omitted.
            if os.environ.get("RAILWAY_ENVIRONMENT") or os.environ.get("PORT"):
                config_name = "production"
            else:
                config_name = "development"

    from stager.config import config_map

    config_cls = config_map.get(config_name, config_map["development"])
    flask_app.config.from_object(config_cls)

    if hasattr(config_cls, "init_app"):
        config_cls.init_app(flask_app)

    # Initialize extensions
    from stager.extensions import db, migrate, init_redis, init_rate_limiter

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    init_redis(flask_app)
    init_rate_limiter(flask_app)

    # Import models so Alembic sees them
    from stager.models import User, Project, SourceImage, Generation, AdminAction  # noqa: F401

    # Register blueprints
    from stager.blueprints.api import api_bp
    from stager.blueprints.admin import admin_bp
    from stager.blueprints.files import files_bp

    flask_app.register_blueprint(api_bp, url_prefix="/api")
    flask_app.register_blueprint(admin_bp, url_prefix="/api/admin")
    flask_app.register_blueprint(files_bp, url_prefix="/api")

    register_error_handlers(flask_app)

    # Register CLI commands
    from stager.cli import register_cli

    register_cli(flask_app)

    # Health check
    @flask_app.route("/health")
    def health():
        from stager.extensions import redis_client

        checks = {"status": "ok"}
        try:
            db.session.execute(db.text("SELECT 1"))
            checks["db"] = "ok"
        except Exception:
            flask_app.logger.exception("Health check DB probe failed")
            checks["db"] = "error"
            checks["status"] = "degraded"
        try:
            if redis_client:
                redis_client.ping()
                checks["redis"] = "ok"
            else:
                checks["redis"] = "not configured"
        except Exception:
            flask_app.logger.exception("Health check Redis probe failed")
            checks["redis"] = "error"
            checks["status"] = "degraded"
        status_code = 200 if checks["status"] == "ok" else 503
        return checks, status_code

    return flask_app


def register_error_handlers(app):
    from stager.errors import StagerError, RateLimited

    @app.errorhandler(StagerError)
    def handle_stager_error(error):
        body = {"success": False, "message": error.message}
        headers = {}
        if isinstance(error, RateLimited):
            headers["Retry-After"] = str(max(1, math.ceil(error.status.reset_at - time.time())))
        return body, error.status_code, headers

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return {"success": False, "message": error.description}, error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        logger.exception("Unhandled error")
        return {"success": False, "message": "Internal server error"}, 500
