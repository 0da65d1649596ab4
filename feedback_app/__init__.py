import os

from flask import Flask
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.middleware.proxy_fix import ProxyFix

# Load .env only for local/dev. In prod, env vars come from the platform.
if os.getenv("APP_ENV", "development") != "production":
    from dotenv import load_dotenv
    load_dotenv(".env")

from .config import get_config
from .errors import register_error_handlers
from .extensions import db, migrate, limiter, cors
from .observability import init_logging, init_sentry
from .security import init_security


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(get_config())
    if config_overrides:
        app.config.update(config_overrides)

    app_env = (os.getenv("APP_ENV", "development") or "development").lower()

    # ---- Rate limiting storage: shared Redis outside dev/test ----
    use_redis = app_env in ("staging", "production")
    storage_uri = os.environ.get("REDIS_URL") if use_redis else "memory://"
    if use_redis and not storage_uri:
        raise RuntimeError("REDIS_URL is required in staging/production for rate limiting")
    app.config.setdefault("RATELIMIT_STORAGE_URI", storage_uri)

    if app_env in ("staging", "production"):
        # Enforce hard requirements at startup (not at import time)
        for name in ("SECRET_KEY", "DATABASE_URL"):
            if not os.getenv(name):
                raise RuntimeError(f"Missing required environment variable: {name}")

    init_logging(app)
    init_sentry(app)

    if app_env in ("staging", "production"):
        init_security(app)

    if app.config.get("PROXY_FIX_X_FOR"):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=app.config["PROXY_FIX_X_FOR"])

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db, directory=os.path.join(os.path.dirname(app.root_path), "migrations"))
    limiter.init_app(app)
    cors.init_app(app)

    from .blueprints.feedback import bp as feedback_bp
    from .blueprints.admin import bp as admin_bp
    from .blueprints.api import bp as api_bp

    app.register_blueprint(feedback_bp, url_prefix="/feedback")
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(api_bp, url_prefix="/api")

    # Legacy prefixes kept for older front-ends
    app.register_blueprint(feedback_bp, url_prefix="/api/feedback", name="feedback_legacy")
    app.register_blueprint(admin_bp, url_prefix="/api", name="admin_legacy")

    register_error_handlers(app)

    from .cli import register_cli
    register_cli(app)

    _init_storage(app)

    return app


def _init_storage(app):
    """Fallback file always exists; tables are created when the database is reachable."""
    from .services.storage import FileStore

    with app.app_context():
        FileStore.from_app(app).ensure()
        if not app.config.get("AUTO_CREATE_TABLES"):
            return
        try:
            db.create_all()
            app.logger.info("Connected to database")
        except SQLAlchemyError as exc:
            app.logger.warning("Database connection error, using JSON storage: %s", exc)
