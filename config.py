# config.py
import os
from datetime import timedelta
from urllib.parse import quote_plus

basedir = os.path.abspath(os.path.dirname(__file__))


def _flag(name, default="false"):
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


def _database_url():
    """DATABASE_URL wins; otherwise build a postgres URL from the DB_* parts."""
    url = os.environ.get("DATABASE_URL")
    if url:
        # Heroku-style scheme is not accepted by SQLAlchemy 1.4+
        return url.replace("postgres://", "postgresql://", 1)

    name = os.environ.get("DB_NAME")
    host = os.environ.get("DB_HOST")
    if not (name and host):
        return None

    user = quote_plus(os.environ.get("DB_USER", ""))
    password = quote_plus(os.environ.get("DB_PASS", ""))
    port = os.environ.get("DB_PORT", "5432")
    sslmode = os.environ.get("DB_SSLMODE", "require")
    auth = f"{user}:{password}@" if user else ""
    return f"postgresql://{auth}{host}:{port}/{name}?sslmode={sslmode}"


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY")
    PORT = int(os.environ.get("PORT", "3000"))

    # Database configuration
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    # Connection pool (server databases only, see create_app)
    DB_POOL_SIZE = int(os.environ.get("DB_POOL_SIZE", "10"))
    DB_POOL_TIMEOUT = int(os.environ.get("DB_POOL_TIMEOUT", "30"))
    DB_POOL_RECYCLE = int(os.environ.get("DB_POOL_RECYCLE", "10"))

    # Passwords
    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "10"))

    # Session settings
    SESSION_COOKIE_NAME = os.environ.get("SESSION_COOKIE_NAME", "edugame_session")
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = False
    # server-side records expire this long after their last write
    PERMANENT_SESSION_LIFETIME = timedelta(hours=int(os.environ.get("SESSION_LIFETIME_HOURS", "168")))

    RATELIMIT_DEFAULT = "200 per hour; 50 per minute"
    RATELIMIT_STORAGE_URI = "memory://"

    # get-players / api/player/<username> have always returned the hash column
    EXPOSE_PASSWORD_HASHES = _flag("EXPOSE_PASSWORD_HASHES", "true")

    STATIC_ROOT = os.environ.get("STATIC_ROOT") or os.path.join(basedir, "public")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_FILE = os.environ.get("LOG_FILE")


class DevelopmentConfig(Config):
    DEBUG = True
    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-secret-key-change-in-production"
    SQLALCHEMY_DATABASE_URI = _database_url() or "sqlite:///" + os.path.join(basedir, "edugame.db")
    SQLALCHEMY_ECHO = _flag("SQLALCHEMY_ECHO")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")


class ProductionConfig(Config):
    SESSION_COOKIE_SECURE = True


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "testing-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    BCRYPT_ROUNDS = 4
    RATELIMIT_ENABLED = False
    EXPOSE_PASSWORD_HASHES = True
    LOG_FILE = None


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
