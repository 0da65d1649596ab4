import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173,http://localhost:5174,"
    "http://supplychain.tpm,https://supplychain.tpm"
)


def _bool(name: str, default: str) -> bool:
    return (os.getenv(name, default) or default).lower() == "true"


class BaseConfig:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-not-secure")

    # Primary store (env in prod; dev may use a local sqlite file)
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL") or "sqlite:///feedback_form.db"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}
    AUTO_CREATE_TABLES = _bool("AUTO_CREATE_TABLES", "true")

    # Fallback store: JSON array under a local data directory
    FEEDBACK_DATA_DIR = os.environ.get("FEEDBACK_DATA_DIR", str(PROJECT_ROOT / "data"))
    FEEDBACK_DATA_FILE = os.environ.get("FEEDBACK_DATA_FILE", "feedback.json")

    # Export rendering
    EXPORT_TIMEZONE = os.environ.get("EXPORT_TIMEZONE", "UTC")

    # Request bodies (JSON and urlencoded) up to 10 MB
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024

    # CORS for the form front-ends
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",") if o.strip()
    ]
    CORS_SUPPORTS_CREDENTIALS = True

    # Flask-Limiter: 100 requests per 15 minutes per client address
    RATELIMIT_DEFAULT = os.environ.get("RATELIMIT_DEFAULT", "100 per 15 minutes")
    RATELIMIT_HEADERS_ENABLED = True

    # Number of trusted proxies in front of the app (0 = use the socket address)
    PROXY_FIX_X_FOR = int(os.environ.get("PROXY_FIX_X_FOR", "0"))

    # Logging / misc
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")


class ProductionConfig(BaseConfig):
    DEBUG = False
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING")
    AUTO_CREATE_TABLES = _bool("AUTO_CREATE_TABLES", "false")


class TestingConfig(BaseConfig):
    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite:///:memory:")
    RATELIMIT_ENABLED = False


_ENV_MAP = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "staging": ProductionConfig,
    "testing": TestingConfig,
}


def get_config():
    env = os.environ.get("APP_ENV", "development").lower()
    return _ENV_MAP.get(env, DevelopmentConfig)
